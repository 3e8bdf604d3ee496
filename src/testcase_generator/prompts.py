"""Prompt text and request payloads for the Gemini generateContent endpoint."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

from .models import FileRecord, PromptRequest, TaskKind

TEST_FRAMEWORK = "Jest and React Testing Library"

SUMMARY_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "summaries": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "title": {"type": "STRING"},
                    "description": {"type": "STRING"},
                },
                "required": ["title", "description"],
            },
        }
    },
    "required": ["summaries"],
}

SUMMARIZE_INSTRUCTION = (
    f"Analyze the following code files and suggest a list of {TEST_FRAMEWORK} test case summaries.\n"
    "For each summary, provide a concise title and a brief description of what the test case will cover.\n"
    "Do not generate the code, only the summaries."
)

GENERATE_INSTRUCTION = (
    "Based on the following code files and the selected test case summary, generate the complete "
    f"test case code using {TEST_FRAMEWORK}.\n"
    "The code should be well-commented, complete, and ready to be saved in a test file "
    "(e.g., Component.test.js).\n"
    "Include necessary imports from '@testing-library/react', 'react', and the component itself."
)


def format_files(files: Iterable[FileRecord]) -> str:
    """Render every file as a path header followed by its full content, in input order."""
    # Content is embedded as-is; f-strings never reinterpret braces in it.
    blocks = [f"--- File: {record.path} ---\n```\n{record.content}\n```" for record in files]
    return "\n\n".join(blocks)


def build_prompt(request: PromptRequest) -> str:
    """Create the single instruction string for a summarize or generate request."""
    file_listing = format_files(request.files)

    if request.kind is TaskKind.SUMMARIZE:
        return f"{SUMMARIZE_INSTRUCTION}\n\nCode Files:\n{file_listing}\n"

    summary = request.summary
    assert summary is not None  # guaranteed by PromptRequest
    return (
        f"{GENERATE_INSTRUCTION}\n\n"
        f"Code Files:\n{file_listing}\n\n"
        "Selected Test Case Summary:\n"
        f"Title: {summary.title}\n"
        f"Description: {summary.description}\n\n"
        "Generate only the code.\n"
    )


def build_payload(request: PromptRequest) -> Dict[str, Any]:
    """Wrap the prompt in a generateContent body, declaring the schema for summaries."""
    contents: List[Dict[str, Any]] = [
        {"role": "user", "parts": [{"text": build_prompt(request)}]},
    ]
    payload: Dict[str, Any] = {"contents": contents}
    if request.kind is TaskKind.SUMMARIZE:
        payload["generationConfig"] = {
            "responseMimeType": "application/json",
            "responseSchema": SUMMARY_RESPONSE_SCHEMA,
        }
    return payload
