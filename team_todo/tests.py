from rest_framework import status
from rest_framework.test import APITestCase


class HealthCheckTest(APITestCase):
    def test_health_is_public(self):
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'ok')
        self.assertIn('timestamp', response.data)

    def test_health_ignores_bad_tokens(self):
        self.client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
