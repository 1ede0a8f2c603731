from django.test import TestCase
from django.contrib.auth import get_user_model
from rest_framework import status
from rest_framework.exceptions import AuthenticationFailed, NotFound
from rest_framework.test import APITestCase

from accounts.exceptions import Conflict
from accounts.services import AuthService, UsersService

# Get the custom user model
User = get_user_model()


class CustomUserModelTest(TestCase):
    def test_create_user(self):
        user = User.objects.create_user(
            email='test@example.com',
            first_name='John',
            last_name='Doe',
            password='testpass123'
        )
        self.assertEqual(user.email, 'test@example.com')
        self.assertEqual(user.first_name, 'John')
        self.assertTrue(user.check_password('testpass123'))
        self.assertNotEqual(user.password, 'testpass123')  # stored hashed

    def test_email_uniqueness(self):
        User.objects.create_user(email='test@example.com', first_name='John', last_name='Doe', password='testpass123')
        with self.assertRaises(Exception):  # Should raise an error if email is not unique
            User.objects.create_user(email='test@example.com', first_name='Jane', last_name='Doe', password='testpass123')

    def test_primary_key_is_uuid(self):
        user = User.objects.create_user(email='test@example.com', first_name='John', last_name='Doe', password='x' * 8)
        self.assertEqual(len(str(user.pk)), 36)


class UsersServiceTest(TestCase):
    def setUp(self):
        self.service = UsersService()
        self.user = self.service.create({
            'email': 'test@example.com',
            'password': 'testpass123',
            'first_name': 'John',
            'last_name': 'Doe',
        })

    def test_create_duplicate_email_conflicts(self):
        with self.assertRaises(Conflict):
            self.service.create({'email': 'TEST@example.com', 'password': 'another1', 'first_name': 'J', 'last_name': 'D'})

    def test_find_by_id_missing_returns_none(self):
        self.assertIsNone(self.service.find_by_id('00000000-0000-0000-0000-000000000000'))

    def test_get_by_id_missing_raises(self):
        with self.assertRaises(NotFound):
            self.service.get_by_id('00000000-0000-0000-0000-000000000000')

    def test_update_rehashes_password(self):
        self.service.update(self.user.pk, {'password': 'newpass456', 'first_name': 'Johnny'})
        user = User.objects.get(pk=self.user.pk)
        self.assertTrue(user.check_password('newpass456'))
        self.assertEqual(user.first_name, 'Johnny')

    def test_update_to_taken_email_conflicts(self):
        self.service.create({'email': 'other@example.com', 'password': 'testpass123', 'first_name': 'O', 'last_name': 'T'})
        with self.assertRaises(Conflict):
            self.service.update(self.user.pk, {'email': 'other@example.com'})

    def test_login_with_wrong_password(self):
        with self.assertRaises(AuthenticationFailed):
            AuthService(self.service).login('test@example.com', 'wrongpass')

    def test_validate_user_unknown_email(self):
        self.assertIsNone(AuthService(self.service).validate_user('nobody@example.com', 'testpass123'))


class UserRegistrationViewTest(APITestCase):
    def test_user_registration_success(self):
        data = {
            'email': 'test@example.com',
            'firstName': 'John',
            'lastName': 'Doe',
            'password': 'testpass123',
        }
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIn('access_token', response.data)
        self.assertIn('refresh_token', response.data)
        self.assertEqual(response.data['user']['email'], 'test@example.com')
        self.assertEqual(response.data['user']['firstName'], 'John')
        self.assertNotIn('password', response.data['user'])

    def test_user_registration_short_password(self):
        data = {'email': 'test@example.com', 'firstName': 'John', 'lastName': 'Doe', 'password': '123'}
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('password', response.data)

    def test_user_registration_invalid_email(self):
        data = {'email': 'not-an-email', 'firstName': 'John', 'lastName': 'Doe', 'password': 'testpass123'}
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_user_registration_duplicate_email(self):
        User.objects.create_user(email='test@example.com', first_name='John', last_name='Doe', password='testpass123')
        data = {'email': 'test@example.com', 'firstName': 'Jane', 'lastName': 'Doe', 'password': 'testpass123'}
        response = self.client.post('/api/auth/register/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['detail'], 'Email already exists')


class UserLoginViewTest(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email='test@example.com',
            first_name='John',
            last_name='Doe',
            password='testpass123'
        )

    def test_user_login_success(self):
        data = {'email': 'test@example.com', 'password': 'testpass123'}
        response = self.client.post('/api/auth/login/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access_token', response.data)
        self.assertIn('refresh_token', response.data)
        self.assertEqual(response.data['user']['id'], str(self.user.id))

    def test_user_login_invalid_credentials(self):
        data = {'email': 'test@example.com', 'password': 'wrongpass'}
        response = self.client.post('/api/auth/login/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data['detail'], 'Invalid credentials')

    def test_user_login_unknown_email(self):
        data = {'email': 'nobody@example.com', 'password': 'testpass123'}
        response = self.client.post('/api/auth/login/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_access_token_authenticates_requests(self):
        login = self.client.post('/api/auth/login/', {'email': 'test@example.com', 'password': 'testpass123'}, format='json')
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {login.data['access_token']}")
        response = self.client.get(f'/api/users/{self.user.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['email'], 'test@example.com')

    def test_refresh_token(self):
        login = self.client.post('/api/auth/login/', {'email': 'test@example.com', 'password': 'testpass123'}, format='json')
        response = self.client.post('/api/auth/token/refresh/', {'refresh': login.data['refresh_token']}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)


class UserViewsTest(APITestCase):
    def setUp(self):
        self.user = User.objects.create_user(
            email='test@example.com',
            first_name='John',
            last_name='Doe',
            password='testpass123'
        )
        self.other = User.objects.create_user(
            email='other@example.com',
            first_name='Jane',
            last_name='Smith',
            password='testpass123'
        )

    def test_list_requires_authentication(self):
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_users(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get('/api/users/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual({u['email'] for u in response.data}, {'test@example.com', 'other@example.com'})
        self.assertIn('teams', response.data[0])

    def test_create_user_is_open(self):
        data = {'email': 'new@example.com', 'firstName': 'New', 'lastName': 'User', 'password': 'testpass123'}
        response = self.client.post('/api/users/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['email'], 'new@example.com')
        self.assertEqual(response.data['teams'], [])

    def test_retrieve_missing_user(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.get('/api/users/00000000-0000-0000-0000-000000000000/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['detail'], 'User not found')

    def test_update_profile(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.put('/api/users/profile/', {'firstName': 'Johnny'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['firstName'], 'Johnny')
        self.assertEqual(response.data['lastName'], 'Doe')

    def test_update_user_email_conflict(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.put(f'/api/users/{self.user.id}/', {'email': 'other@example.com'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_delete_user(self):
        self.client.force_authenticate(user=self.user)
        response = self.client.delete(f'/api/users/{self.other.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.other.pk).exists())
