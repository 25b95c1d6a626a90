"""Plain values describing an incoming submission."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class AnswerInput:
    question_id: str
    answer: Optional[str] = ""


@dataclass(frozen=True)
class FileUpload:
    question_id: str
    file_name: str
    file_type: str
    file_size: int
    base64_content: str = ""


@dataclass
class SubmissionRequest:
    form_id: str
    answers: List[AnswerInput] = field(default_factory=list)
    file_uploads: List[FileUpload] = field(default_factory=list)
