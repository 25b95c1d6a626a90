"""Tests for the form definition API."""
from __future__ import annotations

import json

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from submissions.identity import NAME_IDENTIFIER_CLAIM
from submissions.models import FileAttachment, Response, ResponseDetail

from .models import Form, Option, Question
from .repositories import FormRepository


class FormApiTests(TestCase):
    def setUp(self) -> None:
        self.client = APIClient(HTTP_X_AUTH_CLAIMS=json.dumps({NAME_IDENTIFIER_CLAIM: "5"}))

    def _create(self, **overrides):
        payload = {
            "title": "Employee Onboarding",
            "description": "Collects basic employee data.",
            "questions": [
                {
                    "question_id": "q1",
                    "question_text": "First Name",
                    "type": "text",
                    "required": True,
                },
                {
                    "question_text": "Preferred laptop",
                    "type": "radio",
                    "description": "Pick one",
                    "description_enabled": True,
                    "options": [
                        {"option_id": "mac", "value": "MacBook"},
                        {"option_id": "thinkpad", "value": "ThinkPad"},
                    ],
                },
            ],
        }
        payload.update(overrides)
        return self.client.post(reverse("form-list"), payload, format="json")

    def test_create_and_list_forms(self) -> None:
        response = self._create()
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], Form.DRAFT)
        self.assertEqual(response.data["created_by"], "5")

        form = Form.objects.get()
        questions = list(form.questions.all())
        self.assertEqual([q.order for q in questions], [0, 1])
        self.assertEqual(questions[0].question_id, "q1")
        self.assertTrue(questions[1].question_id)
        self.assertEqual(Option.objects.filter(question=questions[1]).count(), 2)

        listing = self.client.get(reverse("form-list"))
        self.assertEqual(listing.status_code, 200)
        self.assertEqual(len(listing.data), 1)

    def test_publish_form(self) -> None:
        form_id = self._create().data["id"]
        response = self.client.post(reverse("form-publish", args=[form_id]), format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], Form.PUBLISHED)
        self.assertEqual(response.data["published_by"], "5")
        self.assertIsNotNone(response.data["published_at"])

    def test_publish_without_questions(self) -> None:
        form_id = self._create(questions=[]).data["id"]
        response = self.client.post(reverse("form-publish", args=[form_id]), format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["detail"], "Cannot publish a form without questions.")

    def test_only_draft_forms_can_be_modified(self) -> None:
        form_id = self._create().data["id"]
        response = self.client.patch(reverse("form-detail", args=[form_id]), {"title": "Renamed"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["title"], "Renamed")

        Form.objects.filter(pk=form_id).update(status=Form.PUBLISHED)
        response = self.client.patch(reverse("form-detail", args=[form_id]), {"title": "Again"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(Form.objects.get(pk=form_id).title, "Renamed")

    def test_update_replaces_questions(self) -> None:
        form_id = self._create().data["id"]
        response = self.client.patch(
            reverse("form-detail", args=[form_id]),
            {"questions": [{"question_id": "only", "question_text": "Only question"}]},
            format="json",
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(list(Question.objects.values_list("question_id", flat=True)), ["only"])

    def test_published_layout(self) -> None:
        form_id = self._create().data["id"]
        self._create(title="Still a draft")
        self.client.post(reverse("form-publish", args=[form_id]), format="json")

        response = self.client.get(reverse("form-published"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.data), 1)
        first, second = response.data[0]["questions"]
        self.assertEqual(first["options"], [])
        self.assertNotIn("description", first)
        self.assertEqual(second["description"], "Pick one")
        self.assertEqual([o["value"] for o in second["options"]], ["MacBook", "ThinkPad"])

    def test_delete_form_removes_responses(self) -> None:
        form_id = self._create().data["id"]
        for user_id in (1, 2):
            submitted = Response.objects.create(form_id=form_id, user_id=user_id, submitted_at=timezone.now())
            ResponseDetail.objects.create(response=submitted, question_id="q1", answer="Ada")
            FileAttachment.objects.create(
                response=submitted,
                question_id="q2",
                file_name="cv.pdf",
                file_type="application/pdf",
                file_size=3,
                base64_content="AQID",
                uploaded_at=timezone.now(),
            )
        Response.objects.create(form_id="other", user_id=3, submitted_at=timezone.now())

        response = self.client.delete(reverse("form-detail", args=[form_id]))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["message"], "Form and 2 response(s) deleted successfully")
        self.assertFalse(Form.objects.exists())
        self.assertEqual(list(Response.objects.values_list("form_id", flat=True)), ["other"])
        self.assertFalse(ResponseDetail.objects.exists())
        self.assertFalse(FileAttachment.objects.exists())

    def test_health(self) -> None:
        response = self.client.get(reverse("form-health"))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], "ok")


class FormRepositoryTests(TestCase):
    def test_lookup_by_id_and_status(self) -> None:
        published = Form.objects.create(id="form1", title="Published", status=Form.PUBLISHED)
        Form.objects.create(id="form2", title="Draft")
        repository = FormRepository()

        self.assertEqual(repository.get_by_id("form1"), published)
        self.assertIsNone(repository.get_by_id("missing"))
        self.assertIsNone(repository.get_by_id(""))
        self.assertEqual(repository.get_by_status(Form.PUBLISHED), [published])

    def test_question_type_recognition(self) -> None:
        form = Form.objects.create(title="Types")
        for index, qtype in enumerate(["FileUpload", "file", "FILE"]):
            question = Question.objects.create(form=form, question_id=f"f{index}", question_text="x", type=qtype)
            self.assertTrue(question.is_file_upload)
            self.assertFalse(question.is_choice)
        checkbox = Question.objects.create(form=form, question_id="c", question_text="x", type="CheckBox")
        self.assertTrue(checkbox.is_choice)
