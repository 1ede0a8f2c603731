from django.urls import path
from .views import SuggestDueDateView, AnalyzeTaskView

urlpatterns = [
    path('suggest-due-date/', SuggestDueDateView.as_view(), name='ai-suggest-due-date'),
    path('analyze-task/', AnalyzeTaskView.as_view(), name='ai-analyze-task'),
]
