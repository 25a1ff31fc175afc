"""Interactive API request playground."""

from docsite.playground.client import Playground, PlaygroundResponse, send_request
from docsite.playground.request import RequestDescriptor
from docsite.playground.snippets import LANGUAGES, generate_snippet, generate_snippets

__all__ = [
    "LANGUAGES",
    "Playground",
    "PlaygroundResponse",
    "RequestDescriptor",
    "generate_snippet",
    "generate_snippets",
    "send_request",
]
