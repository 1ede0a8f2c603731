from django.contrib import admin

# Register your models here.
from .models import Todo


@admin.register(Todo)
class TodoAdmin(admin.ModelAdmin):
    list_display = ('title', 'status', 'priority', 'team', 'assignee', 'created_by', 'due_date')
    list_filter = ('status', 'priority')
    search_fields = ('title', 'description')
