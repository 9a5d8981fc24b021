from drf_spectacular.utils import extend_schema
from rest_framework.views import APIView

from core.api import success_response
from users.serializers import UserSerializer
from users.services.accounts import get_me


class MeView(APIView):
    serializer_class = UserSerializer

    @extend_schema(
        responses={200: UserSerializer},
        description="Get current authenticated user profile",
    )
    def get(self, request):
        return success_response({"user": UserSerializer(get_me(actor=request.user)).data})
