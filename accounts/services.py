import logging

from django.contrib.auth import get_user_model
from rest_framework.exceptions import AuthenticationFailed, NotFound
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import Conflict

User = get_user_model()

logger = logging.getLogger(__name__)


class UsersService:
    """Persistence and lookup of user accounts."""

    def _queryset(self):
        return User.objects.prefetch_related('teams')

    def create(self, data):
        email = User.objects.normalize_email(data['email'])
        if User.objects.filter(email__iexact=email).exists():
            raise Conflict('Email already exists')

        user = User.objects.create_user(
            email=email,
            password=data['password'],
            first_name=data.get('first_name', ''),
            last_name=data.get('last_name', ''),
        )
        logger.info("Created user %s", user.id)
        return user

    def find_by_email(self, email):
        return self._queryset().filter(email__iexact=email).first()

    def find_by_id(self, user_id):
        return self._queryset().filter(pk=user_id).first()

    def get_by_id(self, user_id):
        user = self.find_by_id(user_id)
        if user is None:
            raise NotFound('User not found')
        return user

    def find_all(self):
        return list(self._queryset().all())

    def update(self, user_id, data):
        user = self.get_by_id(user_id)
        data = dict(data)

        password = data.pop('password', None)
        if password:
            user.set_password(password)

        new_email = data.get('email')
        if new_email and new_email.lower() != user.email.lower():
            if User.objects.filter(email__iexact=new_email).exclude(pk=user.pk).exists():
                raise Conflict('Email already exists')
            data['email'] = User.objects.normalize_email(new_email)

        for attr, value in data.items():
            setattr(user, attr, value)
        user.save()
        return self.get_by_id(user.pk)

    def delete(self, user_id):
        user = self.get_by_id(user_id)
        user.delete()
        logger.info("Deleted user %s", user_id)


class AuthService:
    """Registration and credential checks, returning JWT pairs."""

    def __init__(self, users_service=None):
        self.users_service = users_service or UsersService()

    @staticmethod
    def issue_tokens(user):
        refresh = RefreshToken.for_user(user)
        refresh['email'] = user.email
        return {
            "access_token": str(refresh.access_token),
            "refresh_token": str(refresh),
            "user": {
                "id": str(user.id),
                "email": user.email,
                "firstName": user.first_name,
                "lastName": user.last_name,
            },
        }

    def validate_user(self, email, password):
        user = self.users_service.find_by_email(email)
        if user is None or not user.is_active:
            return None
        if not user.check_password(password):
            return None
        return user

    def register(self, data):
        user = self.users_service.create(data)
        return self.issue_tokens(user)

    def login(self, email, password):
        user = self.validate_user(email, password)
        if user is None:
            logger.info("Rejected login for %s", email)
            raise AuthenticationFailed('Invalid credentials')
        return self.issue_tokens(user)
