"""Code snippets equivalent to a playground request.

Each target language is described by a small template. Values are quoted with
the language's own string-literal rules before substitution, so bodies and
headers containing quotes, backslashes or newlines stay well formed.
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from string import Template

from docsite.playground.request import RequestDescriptor

LANGUAGES = ("curl", "python", "javascript", "go", "java")


def shell_quote(value: str) -> str:
    """POSIX shell single-quoted literal."""
    return "'" + value.replace("'", "'\\''") + "'"


def json_quote(value: str) -> str:
    """Double-quoted literal valid in Python, JavaScript and Java."""
    return json.dumps(value)


def go_quote(value: str) -> str:
    """Go interpreted string literal (raw UTF-8, no surrogate escapes)."""
    return json.dumps(value, ensure_ascii=False)


@dataclass(frozen=True)
class SnippetTemplate:
    """Per-language snippet layout.

    ``document`` is a string.Template with ``$method``, ``$url``,
    ``$headers`` and ``$body`` placeholders; ``header`` formats one header
    line from quoted ``$name``, ``$value`` and ``$pair`` (quoted "Name: value");
    ``body``/``no_body`` produce the ``$body`` fragment.
    """

    label: str
    quote: Callable[[str], str]
    document: Template
    header: Template
    header_separator: str
    body: Template
    no_body: str
    empty_headers: str = ""


TEMPLATES: dict[str, SnippetTemplate] = {
    "curl": SnippetTemplate(
        label="cURL",
        quote=shell_quote,
        document=Template("curl --request $method \\\n  --url $url$headers$body"),
        header=Template(" \\\n  --header $pair"),
        header_separator="",
        body=Template(" \\\n  --data $payload"),
        no_body="",
    ),
    "python": SnippetTemplate(
        label="Python",
        quote=json_quote,
        document=Template(
            "import requests\n"
            "\n"
            "url = $url\n"
            "\n"
            "headers = {\n"
            "$headers\n"
            "}\n"
            "$body"
            "\n"
            "print(response.status_code)\n"
            "print(response.text)\n"
        ),
        header=Template("    $name: $value,"),
        header_separator="\n",
        body=Template(
            "\n"
            "payload = $payload\n"
            "\n"
            "response = requests.request($method, url, headers=headers, data=payload)\n"
        ),
        no_body="\nresponse = requests.request($method, url, headers=headers)\n",
    ),
    "javascript": SnippetTemplate(
        label="JavaScript",
        quote=json_quote,
        document=Template(
            "const url = $url;\n"
            "\n"
            "const options = {\n"
            "  method: $method,\n"
            "  headers: {\n"
            "$headers\n"
            "  },$body\n"
            "};\n"
            "\n"
            "fetch(url, options)\n"
            "  .then((res) => res.text())\n"
            "  .then((text) => console.log(text))\n"
            "  .catch((err) => console.error(err));\n"
        ),
        header=Template("    $name: $value,"),
        header_separator="\n",
        body=Template("\n  body: $payload,"),
        no_body="",
    ),
    "go": SnippetTemplate(
        label="Go",
        quote=go_quote,
        document=Template(
            "package main\n"
            "\n"
            "import (\n"
            '\t"fmt"\n'
            '\t"io"\n'
            '\t"net/http"\n'
            '\t"strings"\n'
            ")\n"
            "\n"
            "func main() {\n"
            "\turl := $url\n"
            "$body"
            "\tif err != nil {\n"
            "\t\tfmt.Println(err)\n"
            "\t\treturn\n"
            "\t}\n"
            "$headers\n"
            "\n"
            "\tres, err := http.DefaultClient.Do(req)\n"
            "\tif err != nil {\n"
            "\t\tfmt.Println(err)\n"
            "\t\treturn\n"
            "\t}\n"
            "\tdefer res.Body.Close()\n"
            "\n"
            "\tbody, _ := io.ReadAll(res.Body)\n"
            "\tfmt.Println(res.StatusCode)\n"
            "\tfmt.Println(string(body))\n"
            "}\n"
        ),
        header=Template("\treq.Header.Add($name, $value)"),
        header_separator="\n",
        body=Template(
            "\tpayload := strings.NewReader($payload)\n"
            "\n"
            "\treq, err := http.NewRequest($method, url, payload)\n"
        ),
        no_body="\treq, err := http.NewRequest($method, url, nil)\n",
    ),
    "java": SnippetTemplate(
        label="Java",
        quote=json_quote,
        document=Template(
            "import java.net.URI;\n"
            "import java.net.http.HttpClient;\n"
            "import java.net.http.HttpRequest;\n"
            "import java.net.http.HttpResponse;\n"
            "\n"
            "public class ApiRequest {\n"
            "    public static void main(String[] args) throws Exception {\n"
            "        HttpClient client = HttpClient.newHttpClient();\n"
            "\n"
            "        HttpRequest request = HttpRequest.newBuilder()\n"
            "                .uri(URI.create($url))\n"
            "$headers"
            "                .method($method, $body)\n"
            "                .build();\n"
            "\n"
            "        HttpResponse<String> response = client.send(request,\n"
            "                HttpResponse.BodyHandlers.ofString());\n"
            "\n"
            "        System.out.println(response.statusCode());\n"
            "        System.out.println(response.body());\n"
            "    }\n"
            "}\n"
        ),
        header=Template("                .header($name, $value)\n"),
        header_separator="",
        body=Template("HttpRequest.BodyPublishers.ofString($payload)"),
        no_body="HttpRequest.BodyPublishers.noBody()",
    ),
}


def generate_snippet(language: str, request: RequestDescriptor) -> str:
    """Render a request as source code in one target language.

    Args:
        language: One of LANGUAGES
        request: Request to render; GET requests are rendered without a body

    Returns:
        Source text

    Raises:
        ValueError: If the language is not supported
    """
    template = TEMPLATES.get(language.lower())
    if template is None:
        supported = ", ".join(LANGUAGES)
        raise ValueError(f"Unsupported snippet language: {language} (expected one of {supported})")

    quote = template.quote
    method = quote(request.method)
    # Shell flags take the bare method name
    if language.lower() == "curl":
        method = request.method

    header_lines = [
        template.header.substitute(
            name=quote(name),
            value=quote(value),
            pair=quote(f"{name}: {value}"),
        )
        for name, value in request.outgoing_headers().items()
    ]
    headers = template.header_separator.join(header_lines) or template.empty_headers

    payload = request.outgoing_body()
    if payload is None:
        body = Template(template.no_body).substitute(method=method)
    else:
        body = template.body.substitute(payload=quote(payload), method=method)

    return template.document.substitute(
        method=method,
        url=quote(request.url),
        headers=headers,
        body=body,
    )


def generate_snippets(request: RequestDescriptor) -> dict[str, str]:
    """Render a request in every supported language, in LANGUAGES order."""
    return {language: generate_snippet(language, request) for language in LANGUAGES}


def language_label(language: str) -> str:
    """Display name for a snippet language."""
    return TEMPLATES[language].label
