from django.contrib.auth import authenticate, get_user_model
from rest_framework import exceptions, serializers

User = get_user_model()


def _claim_email(value: str, *, owner=None) -> str:
    email = value.strip().lower()
    taken = User.objects.filter(email__iexact=email)
    if owner is not None:
        taken = taken.exclude(pk=owner.pk)
    if taken.exists():
        raise serializers.ValidationError("A user with this email already exists.")
    return email


class TravellerSerializer(serializers.ModelSerializer):
    checkout = serializers.SerializerMethodField()
    booking_count = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "first_name",
            "last_name",
            "display_name",
            "phone",
            "is_staff",
            "checkout",
            "booking_count",
        ]
        read_only_fields = fields

    def get_checkout(self, obj):
        return obj.checkout_contact()

    def get_booking_count(self, obj):
        return obj.bookings.count()


class SignupSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8, trim_whitespace=False)
    first_name = serializers.CharField(required=False, allow_blank=True, default="")
    last_name = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="", max_length=30)

    def validate_email(self, value):
        return _claim_email(value)

    def create(self, validated_data):
        email = validated_data["email"]
        user = User.objects.create_user(
            username=email,
            email=email,
            password=validated_data["password"],
            first_name=validated_data["first_name"],
            last_name=validated_data["last_name"],
            phone=validated_data["phone"].strip(),
        )
        user.display_name = user.get_full_name() or email
        user.save(update_fields=["display_name"])
        return user


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get("request"),
            username=attrs["email"].strip().lower(),
            password=attrs["password"],
        )
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed("No active account found with the given credentials.")
        attrs["user"] = user
        return attrs


class ProfileSerializer(serializers.ModelSerializer):
    """Contact details travellers can change; they become the checkout defaults."""

    class Meta:
        model = User
        fields = ["email", "first_name", "last_name", "display_name", "phone"]

    def validate_email(self, value):
        return _claim_email(value, owner=self.instance)

    def update(self, instance, validated_data):
        if "email" in validated_data:
            validated_data["username"] = validated_data["email"]
        return super().update(instance, validated_data)
