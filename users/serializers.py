# ==================== USERS/SERIALIZERS.PY ====================
from rest_framework import serializers
from django.contrib.auth import authenticate
from .models import CustomUser


class UserRegistrationSerializer(serializers.ModelSerializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    password_confirm = serializers.CharField(write_only=True)

    class Meta:
        model = CustomUser
        fields = ['username', 'email', 'first_name', 'last_name', 'phone_number', 'password', 'password_confirm']

    def validate_email(self, value):
        email = value.lower()
        if CustomUser.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("User already exists with this email")
        return email

    def validate(self, data):
        if data['password'] != data.pop('password_confirm'):
            raise serializers.ValidationError({"password": "Passwords do not match"})
        return data

    def create(self, validated_data):
        # Role is never self-assigned at signup
        return CustomUser.objects.create_user(**validated_data)


class UserLoginSerializer(serializers.Serializer):
    """Log in with username or email"""
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        username = data['username']
        if '@' in username:
            match = CustomUser.objects.filter(email__iexact=username).values_list('username', flat=True).first()
            username = match or username

        user = authenticate(username=username, password=data['password'])
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        data['user'] = user
        return data


class UserProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone_number', 'role',
                  'wallet_balance', 'reward_points', 'created_at']
        read_only_fields = ['role', 'wallet_balance', 'reward_points', 'created_at']
