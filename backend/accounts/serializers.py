# accounts/serializers.py
from django.contrib.auth import get_user_model, password_validation
from rest_framework import serializers

from wallets.serializers import WalletSerializer

User = get_user_model()


class RegisterIn(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True)

    class Meta:
        model = User
        fields = ("username", "email", "password", "display_name")
        extra_kwargs = {"email": {"required": True}}

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("This email is already registered.")
        return value

    def validate_password(self, value):
        password_validation.validate_password(value)
        return value

    def create(self, validated_data):
        # The wallet is opened by the post_save signal
        return User.objects.create_user(**validated_data)


class LoginIn(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)


class ProfileOut(serializers.ModelSerializer):
    name = serializers.CharField(source="public_name", read_only=True)
    wallet = WalletSerializer(read_only=True)

    class Meta:
        model = User
        fields = ("id", "username", "email", "display_name", "name", "is_staff", "wallet")
