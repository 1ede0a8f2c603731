from rest_framework import status, permissions
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi

from .serializers import (
    AuthResponseSerializer, UserLoginSerializer, UserRegistrationSerializer,
    UserSerializer, UserUpdateSerializer,
)
from .services import AuthService, UsersService


class UserRegistrationView(APIView):
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        operation_summary="Register a new user",
        operation_description="Creates an account and returns a JWT pair with the public user data.",
        request_body=UserRegistrationSerializer,
        responses={
            201: AuthResponseSerializer,
            400: openapi.Response(description="Validation errors in request body"),
            409: openapi.Response(description="Email already exists"),
        },
        tags=['Auth']
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = AuthService().register(serializer.validated_data)
        return Response(payload, status=status.HTTP_201_CREATED)


class UserLoginView(APIView):
    permission_classes = [permissions.AllowAny]

    @swagger_auto_schema(
        operation_summary="Log in",
        operation_description="Authenticate with email and password and return JWT tokens",
        request_body=UserLoginSerializer,
        responses={
            200: AuthResponseSerializer,
            401: openapi.Response(description="Invalid credentials"),
        },
        tags=['Auth']
    )
    def post(self, request):
        serializer = UserLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = AuthService().login(
            serializer.validated_data['email'],
            serializer.validated_data['password'],
        )
        return Response(payload, status=status.HTTP_200_OK)


class UserListCreateView(APIView):

    def get_permissions(self):
        # account creation is open, like registration
        if self.request.method == 'POST':
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    @swagger_auto_schema(responses={200: UserSerializer(many=True)}, tags=['Users'])
    def get(self, request):
        users = UsersService().find_all()
        return Response(UserSerializer(users, many=True).data)

    @swagger_auto_schema(
        request_body=UserRegistrationSerializer,
        responses={201: UserSerializer, 409: openapi.Response(description="Email already exists")},
        tags=['Users']
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = UsersService()
        user = service.create(serializer.validated_data)
        return Response(UserSerializer(service.get_by_id(user.pk)).data, status=status.HTTP_201_CREATED)


class UserDetailView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(responses={200: UserSerializer, 404: "User not found"}, tags=['Users'])
    def get(self, request, pk):
        return Response(UserSerializer(UsersService().get_by_id(pk)).data)

    @swagger_auto_schema(request_body=UserUpdateSerializer, responses={200: UserSerializer}, tags=['Users'])
    def put(self, request, pk):
        serializer = UserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = UsersService().update(pk, serializer.validated_data)
        return Response(UserSerializer(user).data)

    @swagger_auto_schema(responses={204: "User deleted", 404: "User not found"}, tags=['Users'])
    def delete(self, request, pk):
        UsersService().delete(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


class ProfileDetailView(APIView):
    """Update the profile of the logged-in user."""
    permission_classes = [permissions.IsAuthenticated]

    @swagger_auto_schema(request_body=UserUpdateSerializer, responses={200: UserSerializer}, tags=['Users'])
    def put(self, request):
        serializer = UserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = UsersService().update(request.user.pk, serializer.validated_data)
        return Response(UserSerializer(user).data)
