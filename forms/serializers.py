"""Serializers for form definitions."""
from __future__ import annotations

import uuid
from typing import Any, Dict, List

from rest_framework import serializers

from .models import Form, Option, Question


class OptionSerializer(serializers.ModelSerializer):
    class Meta:
        model = Option
        fields = ["option_id", "value"]
        extra_kwargs = {"option_id": {"required": False, "allow_blank": True}}


class QuestionSerializer(serializers.ModelSerializer):
    options = OptionSerializer(many=True, required=False)

    class Meta:
        model = Question
        fields = [
            "question_id",
            "question_text",
            "type",
            "required",
            "description",
            "description_enabled",
            "order",
            "options",
        ]
        extra_kwargs = {
            "question_id": {"required": False, "allow_blank": True},
            "order": {"read_only": True},
        }


class FormSerializer(serializers.ModelSerializer):
    questions = QuestionSerializer(many=True, required=False)

    class Meta:
        model = Form
        fields = [
            "id",
            "title",
            "description",
            "status",
            "created_by",
            "published_by",
            "published_at",
            "created_at",
            "updated_at",
            "questions",
        ]
        read_only_fields = ["status", "created_by", "published_by", "published_at"]

    def create(self, validated_data):  # type: ignore[override]
        questions = validated_data.pop("questions", [])
        form = Form.objects.create(**validated_data)
        _create_questions(form, questions)
        return form

    def update(self, instance, validated_data):  # type: ignore[override]
        questions = validated_data.pop("questions", None)
        for attr, value in validated_data.items():
            setattr(instance, attr, value)
        instance.save()

        if questions is not None:
            instance.questions.all().delete()
            _create_questions(instance, questions)
        return instance


def _create_questions(form: Form, questions: List[Dict[str, Any]]) -> None:
    for index, question in enumerate(questions):
        options = question.pop("options", None) or []
        if not question.get("question_id"):
            question["question_id"] = uuid.uuid4().hex
        created = Question.objects.create(form=form, order=index, **question)
        for position, option in enumerate(options):
            Option.objects.create(question=created, order=position, **option)


class QuestionLayoutSerializer(serializers.ModelSerializer):
    """Question shape presented to respondents."""

    options = OptionSerializer(many=True, read_only=True)

    class Meta:
        model = Question
        fields = ["question_id", "question_text", "type", "required", "description", "options"]

    def to_representation(self, instance):  # type: ignore[override]
        data = super().to_representation(instance)
        if not instance.description_enabled:
            data.pop("description", None)
        if data.get("options") is None:
            data["options"] = []
        return data


class FormLayoutSerializer(serializers.ModelSerializer):
    questions = QuestionLayoutSerializer(many=True, read_only=True)

    class Meta:
        model = Form
        fields = ["id", "title", "description", "status", "published_at", "questions"]
