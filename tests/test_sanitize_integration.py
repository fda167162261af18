from __future__ import annotations

import html
import json
import random
import unittest
from pathlib import Path
from typing import Any

from whitelisthtml import DEFAULT_POLICY, build_policy, identity, make_url_sanitizer, parse_fragment, sanitize
from whitelisthtml.node import CommentNode, ElementNode, Node
from whitelisthtml.policy import SanitizationPolicy

_CASES_DIR = Path(__file__).with_name("whitelisthtml-sanitize-tests")

# Fragments of malformed inline CSS: unterminated strings and urls, bad urls,
# stray escapes and unbalanced blocks.
_MALFORMED_STYLE_PARTS = [
    "border: 'x",
    "border: \"x\\",
    "border: 'a\nb",
    "margin: url(",
    "border: url(x",
    "padding: url(a b)",
    "border: url('x'",
    "margin: \\",
    "padding: a\\",
    "border: calc(1px",
    "margin: [0",
    "padding: )",
    "border: }",
    "/* c",
    "margin: 0",
    "padding: 1px !important",
    "border: 1px solid red",
    ";",
]


def _build_policy(options: Any) -> SanitizationPolicy:
    if options is None:
        return DEFAULT_POLICY

    if not isinstance(options, dict):
        raise TypeError("policy must be an object")

    urls = options.get("urls")
    tags = None
    if "tags" in options:
        url_sanitizer = make_url_sanitizer(urls if urls is not None else ["http://", "https://"])
        sanitizers = {"identity": identity, "url": url_sanitizer}
        tags = {
            tag: {attr: sanitizers[kind] for attr, kind in attrs.items()} for tag, attrs in options["tags"].items()
        }

    return build_policy(
        tags=tags,
        css=options.get("css"),
        urls=urls,
        check_css_values=options.get("check_css_values", False),
    )


def _load_cases() -> list[dict[str, Any]]:
    cases_path = _CASES_DIR / "cases.json"
    cases = json.loads(cases_path.read_text(encoding="utf-8"))
    if not isinstance(cases, list):
        raise TypeError("cases.json must contain a list")
    return cases


class TestSanitizeIntegration(unittest.TestCase):
    def test_sanitize_cases(self) -> None:
        for case in _load_cases():
            name = case["name"]
            with self.subTest(name=name):
                policy = _build_policy(case.get("policy"))
                escape = case.get("escape", True)
                actual = sanitize(case["input"], policy=policy, escape=escape)
                assert actual == case["output"], f"{name}: {actual!r} != {case['output']!r}"

    def test_sanitize_is_idempotent(self) -> None:
        for case in _load_cases():
            name = case["name"]
            with self.subTest(name=name):
                policy = _build_policy(case.get("policy"))
                escape = case.get("escape", True)
                once = sanitize(case["input"], policy=policy, escape=escape)
                assert sanitize(once, policy=policy, escape=escape) == once

    def test_sanitize_is_idempotent_for_malformed_styles(self) -> None:
        rng = random.Random(20240611)
        for i in range(400):
            parts = [rng.choice(_MALFORMED_STYLE_PARTS) for _ in range(rng.randint(1, 4))]
            style = rng.choice(["; ", ";", " "]).join(parts)
            tag = rng.choice(["p", "span", "a", "img"])
            source = f'<{tag} style="{html.escape(style)}">x</{tag}>'
            escape = rng.random() < 0.5
            with self.subTest(i=i, source=source, escape=escape):
                once = sanitize(source, escape=escape)
                assert sanitize(once, escape=escape) == once
                for node in parse_fragment(once).children:
                    if isinstance(node, ElementNode):
                        assert set(node.style) <= set(DEFAULT_POLICY.css)

    def test_output_reparses_to_whitelisted_markup(self) -> None:
        payloads = [
            "<script>alert(1)</script>",
            "<img src=x onerror=alert(1)>",
            '<a href="javascript:alert(1)">x</a>',
            "<svg onload=alert(1)>",
            '<iframe srcdoc="<script>alert(1)</script>"></iframe>',
            '<div style="background:url(javascript:alert(1))">x</div>',
            "<p><!--<script>alert(1)</script>--></p>",
            "<b><p>mis</b>nested</p>",
            "<math><mi><style><img src=x onerror=alert(1)></style></mi></math>",
        ]
        for payload in payloads:
            for escape in (True, False):
                with self.subTest(payload=payload, escape=escape):
                    out = sanitize(payload, escape=escape)
                    stack: list[Node] = [parse_fragment(out)]
                    while stack:
                        node = stack.pop()
                        stack.extend(node.children)
                        assert not isinstance(node, CommentNode)
                        if not isinstance(node, ElementNode):
                            continue
                        assert node.name in DEFAULT_POLICY.tags
                        for attr, value in node.attrs.items():
                            assert attr == "style" or attr in DEFAULT_POLICY.tags[node.name]
                            if attr in {"href", "src", "ping"}:
                                assert value == "" or value.startswith(("http://", "https://"))
                        assert set(node.style) <= set(DEFAULT_POLICY.css)
