"""
Views for office accounts.

API Endpoints:
- /api/auth/register/ - Register an ADMIN, JO or TECHNICIAN account
- /api/auth/login/ - Obtain JWT pair (audited)
- /api/auth/logout/ - Blacklist refresh token
- /api/auth/token/refresh/ - Refresh access token
- /api/auth/profile/ - Own profile
- /api/auth/change-password/ - Change own password
- /api/auth/users/ - User list (admin only)
"""

import logging

from django.contrib.auth import get_user_model
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from audit.models import AuditAction, AuditModule
from audit.services import log_audit, log_login
from .permissions import IsSystemAdmin
from .serializers import (
    UserRegistrationSerializer,
    UserSerializer,
    CustomTokenObtainPairSerializer,
    ChangePasswordSerializer,
)

User = get_user_model()
logger = logging.getLogger(__name__)


class UserRegistrationView(generics.CreateAPIView):
    """
    API endpoint for user registration.
    No authentication required.
    """
    queryset = User.objects.all()
    serializer_class = UserRegistrationSerializer
    permission_classes = [permissions.AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        log_audit(
            AuditAction.CREATE, AuditModule.USERS,
            f"Registered {user.get_role_display()} account {user.username}",
            user=user, request=request, record=user,
        )
        logger.info(f"Registered new {user.role} account: {user.username}")

        # Generate tokens for the new user
        refresh = RefreshToken.for_user(user)

        return Response({
            'message': 'Registration successful.',
            'user': UserSerializer(user).data,
            'tokens': {
                'refresh': str(refresh),
                'access': str(refresh.access_token),
            }
        }, status=status.HTTP_201_CREATED)


class CustomTokenObtainPairView(TokenObtainPairView):
    """
    Custom JWT token obtain view with additional user information.
    Successful and failed attempts are both written to the audit trail.
    """
    serializer_class = CustomTokenObtainPairSerializer

    def post(self, request, *args, **kwargs):
        username = request.data.get('username', '')
        try:
            response = super().post(request, *args, **kwargs)
        except AuthenticationFailed:
            user = User.objects.filter(username=username).first()
            log_login(request, username, user=user, success=False)
            logger.warning(f"Failed login attempt for {username}")
            raise

        user = User.objects.filter(username=username).first()
        log_login(request, username, user=user, success=True)
        return response


class UserProfileView(generics.RetrieveUpdateAPIView):
    """
    API endpoint for retrieving and updating user profile.
    Requires authentication.
    """
    serializer_class = UserSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_object(self):
        return self.request.user


class ChangePasswordView(APIView):
    """
    API endpoint for changing user password.
    Requires authentication.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(
            data=request.data,
            context={'request': request}
        )
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data['new_password'])
        user.save()

        log_audit(
            AuditAction.PASSWORD_CHANGE, AuditModule.AUTH,
            f"User {user.username} changed their password",
            request=request, record=user,
        )

        return Response({
            'message': 'Password changed successfully'
        }, status=status.HTTP_200_OK)


class LogoutView(APIView):
    """
    API endpoint for user logout.
    Blacklists the refresh token.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        refresh_token = request.data.get('refresh_token')
        if not refresh_token:
            return Response(
                {'error': 'Refresh token is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            token = RefreshToken(refresh_token)
            token.blacklist()
        except TokenError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        log_audit(
            AuditAction.LOGOUT, AuditModule.AUTH,
            f"User {request.user.username} logged out",
            request=request,
        )

        return Response({
            'message': 'Logout successful'
        }, status=status.HTTP_200_OK)


@api_view(['GET'])
@permission_classes([IsSystemAdmin])
def user_list(request):
    """
    API endpoint for listing office accounts.
    Only accessible by administrators.
    """
    users = User.objects.all().order_by('username')

    role = request.GET.get('role')
    if role:
        users = users.filter(role=role)

    is_active = request.GET.get('is_active')
    if is_active is not None:
        users = users.filter(is_active=is_active.lower() == 'true')

    serializer = UserSerializer(users, many=True)
    return Response(serializer.data)
