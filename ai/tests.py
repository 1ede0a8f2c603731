from datetime import datetime, timedelta, timezone as dt_timezone
from unittest import mock

from django.contrib.auth import get_user_model
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.test import APITestCase

from .services import TaskAIService

User = get_user_model()

FIXED_NOW = datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc)


class SuggestDueDateTest(SimpleTestCase):
    def test_high_priority_bug_fix(self):
        result = TaskAIService.suggest_due_date('Urgent bug fix', 'Critical security vulnerability', 'high', 3)
        self.assertGreater(result['confidence'], 0.7)
        self.assertIn('High priority', result['reasoning'])

    def test_low_priority_documentation(self):
        result = TaskAIService.suggest_due_date('Documentation update', 'Update README file', 'low', 1)
        self.assertGreater(result['confidence'], 0.5)
        self.assertIn('Low priority', result['reasoning'])

    @mock.patch('ai.services.timezone.now', return_value=FIXED_NOW)
    def test_suggested_date_is_now_plus_final_days(self, _now):
        # "document" gives 3 days, low priority adds 2
        result = TaskAIService.suggest_due_date('Documentation update', 'Update README file', 'low', 1)
        self.assertEqual(result['suggestedDueDate'], FIXED_NOW + timedelta(days=5))
        self.assertTrue(result['reasoning'].endswith('Final suggestion: 5 days.'))

    @mock.patch('ai.services.timezone.now', return_value=FIXED_NOW)
    def test_urgent_never_goes_below_one_day(self, _now):
        result = TaskAIService.suggest_due_date('Setup CI', '', 'urgent', 1)
        self.assertEqual(result['suggestedDueDate'], FIXED_NOW + timedelta(days=1))

    def test_long_description_adds_days(self):
        description = ' '.join(['word'] * 60)
        self.assertEqual(TaskAIService._calculate_base_days('Implement search', description, 'medium'), 7)
        self.assertEqual(TaskAIService._calculate_base_days('Implement search', ' '.join(['word'] * 30), 'medium'), 6)

    def test_workload_adjustment(self):
        self.assertEqual(TaskAIService._calculate_workload_adjustment(10), 0)
        self.assertEqual(TaskAIService._calculate_workload_adjustment(50), 1)
        self.assertEqual(TaskAIService._calculate_workload_adjustment(70), 2)
        self.assertEqual(TaskAIService._calculate_workload_adjustment(90), 3)

    def test_confidence_is_clamped(self):
        self.assertEqual(TaskAIService._calculate_confidence('Fix', '', 'low'), 0.5)
        self.assertEqual(
            TaskAIService._calculate_confidence('Implement login flow', 'OAuth with two providers and refresh', 'urgent'),
            0.9,
        )

    def test_reasoning_mentions_detailed_description(self):
        result = TaskAIService.suggest_due_date(
            'Design onboarding',
            'Sketch the onboarding screens and walk the product team through each step',
            'medium',
            2,
        )
        self.assertIn('Design tasks often require 2-5 days for iterations', result['reasoning'])
        self.assertIn('Detailed description indicates higher complexity', result['reasoning'])


class AnalyzeTaskComplexityTest(SimpleTestCase):
    def test_simple_update(self):
        result = TaskAIService.analyze_task_complexity('Update email template', 'Change the welcome email text')
        self.assertEqual(result['complexity'], 'low')
        self.assertLess(result['estimatedHours'], 4)

    def test_complex_title_with_long_description(self):
        result = TaskAIService.analyze_task_complexity('Implement billing system', ' '.join(['detail'] * 120))
        self.assertEqual(result['complexity'], 'high')
        self.assertEqual(result['estimatedHours'], 28)
        self.assertEqual(len(result['factors']), 2)

    def test_brief_description_lowers_medium_tasks(self):
        result = TaskAIService.analyze_task_complexity('Review notes', 'Skim the meeting notes')
        self.assertEqual(result, {
            'complexity': 'low',
            'estimatedHours': 4,
            'factors': ['Brief description suggests straightforward task'],
        })

    def test_defaults_without_description(self):
        result = TaskAIService.analyze_task_complexity('Review notes', '')
        self.assertEqual(result, {'complexity': 'medium', 'estimatedHours': 8, 'factors': []})


class AIViewsTest(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email='test@example.com',
            first_name='John',
            last_name='Doe',
            password='testpass123'
        )
        self.client.force_authenticate(user=self.user)

    def test_suggest_due_date(self):
        data = {
            'title': 'Urgent bug fix',
            'description': 'Critical security vulnerability',
            'priority': 'high',
            'teamWorkload': 3,
        }
        response = self.client.post('/api/ai/suggest-due-date/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('suggestedDueDate', response.data)
        self.assertGreater(response.data['confidence'], 0.7)
        self.assertIn('High priority', response.data['reasoning'])

    def test_suggest_due_date_workload_out_of_range(self):
        data = {'title': 'Urgent bug fix', 'priority': 'high', 'teamWorkload': 11}
        response = self.client.post('/api/ai/suggest-due-date/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('teamWorkload', response.data)

    def test_analyze_task(self):
        data = {'title': 'Update email template', 'description': 'Change the welcome email text'}
        response = self.client.post('/api/ai/analyze-task/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['complexity'], 'low')
        self.assertEqual(response.data['estimatedHours'], 3)

    def test_requires_authentication(self):
        self.client.force_authenticate(user=None)
        response = self.client.post('/api/ai/analyze-task/', {'title': 'Anything'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_analyze_counts_trailing_space_as_a_word(self):
        # 19 words plus a trailing space split into 20 chunks
        data = {'title': 'Review notes', 'description': ' '.join(['word'] * 19) + ' '}
        response = self.client.post('/api/ai/analyze-task/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['complexity'], 'medium')
        self.assertEqual(response.data['estimatedHours'], 8)

    def test_suggest_keeps_description_whitespace(self):
        data = {
            'title': 'Review the release',
            'description': 'a' * 20 + ' ',
            'priority': 'medium',
            'teamWorkload': 1,
        }
        response = self.client.post('/api/ai/suggest-due-date/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['confidence'], 0.8)

    def test_null_description_is_treated_as_empty(self):
        response = self.client.post(
            '/api/ai/analyze-task/', {'title': 'Review notes', 'description': None}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['complexity'], 'medium')

        data = {'title': 'Review notes', 'description': None, 'priority': 'low', 'teamWorkload': 2}
        response = self.client.post('/api/ai/suggest-due-date/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['confidence'], 0.5)
