"""Sample assessments for development stores."""

from __future__ import annotations

from typing import Any, Iterable


def sample_assessment(job_id: str, job_title: str | None = None) -> dict[str, Any]:
    """Assessment covering every question type and a few visibility rules."""
    title = job_title or f"Job {job_id}"

    def qid(number: int) -> str:
        return f"q{number}-{job_id}"

    def options(number: int, *values: str) -> list[dict[str, str]]:
        return [
            {"id": f"q{number}o{index}-{job_id}", "label": value, "value": value}
            for index, value in enumerate(values, start=1)
        ]

    general = {
        "id": f"sec-1-{job_id}",
        "title": "General",
        "description": "Basic information",
        "questions": [
            {"id": qid(1), "type": "short-text", "label": "Full name", "required": True, "validation": {"maxLength": 120}},
            {"id": qid(2), "type": "long-text", "label": "Tell us about yourself", "required": False, "validation": {"maxLength": 1000}},
            {"id": qid(3), "type": "numeric", "label": "Years of experience", "required": True, "validation": {"min": 0, "max": 50}},
            {
                "id": qid(4),
                "type": "single-choice",
                "label": "Open to relocation?",
                "required": True,
                "options": options(4, "Yes", "No"),
            },
            {
                "id": qid(5),
                "type": "short-text",
                "label": "Preferred cities (if yes)",
                "required": False,
                "showIf": {"questionId": qid(4), "equals": "Yes"},
            },
            {
                "id": qid(6),
                "type": "file-upload",
                "label": "Upload resume (file name is stored only)",
                "required": False,
            },
        ],
    }
    technical = {
        "id": f"sec-2-{job_id}",
        "title": "Technical",
        "description": "Role-specific questions",
        "questions": [
            {
                "id": qid(7),
                "type": "multi-choice",
                "label": "Tech stack familiarity",
                "required": True,
                "options": options(7, "React", "Node", "Python", "Go"),
            },
            {
                "id": qid(8),
                "type": "single-choice",
                "label": "Have you led a team before?",
                "required": False,
                "options": options(8, "Yes", "No"),
            },
            {
                "id": qid(9),
                "type": "long-text",
                "label": "Describe your leadership experience",
                "required": False,
                "validation": {"maxLength": 800},
                "showIf": {"questionId": qid(8), "equals": "Yes"},
            },
            {
                "id": qid(10),
                "type": "single-choice",
                "label": "Preferred work setup",
                "required": True,
                "options": options(10, "Remote", "Hybrid", "Onsite"),
            },
            {
                "id": qid(11),
                "type": "short-text",
                "label": "Which days can you work onsite? (if Onsite/Hybrid)",
                "required": False,
                "showIf": {"questionId": qid(10), "equals": "Hybrid,Onsite"},
            },
        ],
    }
    return {
        "jobId": job_id,
        "title": f"Assessment for {title}",
        "description": "Seeded assessment",
        "sections": [general, technical],
    }


def sample_assessments(job_ids: Iterable[str]) -> dict[str, dict[str, Any]]:
    return {str(job_id): sample_assessment(str(job_id)) for job_id in job_ids}


__all__ = ["sample_assessment", "sample_assessments"]
