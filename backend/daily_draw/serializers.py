# daily_draw/serializers.py
from rest_framework import serializers


class EnterIn(serializers.Serializer):
    tokens = serializers.IntegerField(min_value=1)


class DateKeyIn(serializers.Serializer):
    date = serializers.DateField(required=False, input_formats=["%Y-%m-%d"])


class ParticipantOut(serializers.Serializer):
    user_id = serializers.IntegerField()
    name = serializers.CharField()
    tokens = serializers.IntegerField()


class PotOut(serializers.Serializer):
    date = serializers.DateField(source="date_key")
    status = serializers.CharField()
    total_pot = serializers.IntegerField()
    participants = ParticipantOut(many=True)
    winner_id = serializers.IntegerField(allow_null=True)


class DrawResultOut(serializers.Serializer):
    date = serializers.DateField(source="date_key")
    winner_id = serializers.IntegerField()
    payout = serializers.IntegerField()
    participants = serializers.IntegerField()


class WinnerOut(serializers.Serializer):
    date = serializers.DateField(source="date_key")
    winner_id = serializers.IntegerField()
    name = serializers.CharField(source="winner.public_name")
    payout = serializers.IntegerField()
    participants = serializers.IntegerField()
    closed_at = serializers.DateTimeField()
