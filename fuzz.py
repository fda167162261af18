#!/usr/bin/env python3
"""
Random fuzzer for the whitelist sanitizer.
Generates hostile/malformed HTML and checks that sanitizing it never crashes,
is idempotent, and only ever produces whitelisted markup.
"""

import argparse
import random
import string
import sys
import time
import traceback

from whitelisthtml import DEFAULT_POLICY, ElementNode, parse_fragment, sanitize

TAGS = [
    "div", "span", "p", "a", "img", "b", "i", "u", "br",
    "table", "tr", "td", "form", "input", "button", "select", "option", "textarea",
    "script", "style", "title", "iframe", "object", "embed", "svg", "math", "mi",
    "template", "noscript", "pre", "xmp", "plaintext", "noembed", "noframes", "foo",
]

ATTRIBUTES = [
    "href", "src", "ping", "alt", "title", "dir", "lang", "width", "height", "rel",
    "target", "style", "id", "class", "onclick", "onerror", "onload", "srcdoc",
    "xlink:href", "formaction",
]

URL_VALUES = [
    "https://example.com", "http://example.com/?a=1&b=2", "javascript:alert(1)",
    "JaVaScRiPt:alert(1)", " javascript:alert(1)", "data:text/html,<script>alert(1)</script>",
    "//example.com", "/relative", "#frag", "", "vbscript:x", "https://x\" onerror=\"alert(1)",
]

STYLE_VALUES = [
    "border: 1px solid red", "margin: 0; padding: 2px", "color: red",
    "background: url(javascript:alert(1))", "border: url('x')", "border: 1px !important",
    "margin:", ";;;", "border: expression(alert(1))", "/* c */ padding: 1px",
    "border: 'abc", "padding: 1px; border: 'x", "margin: url(", "border: url(a b)",
    "border: \"x\\", "margin: \\", "border: calc(1px", "padding: )",
]

SPECIAL_CHARS = ["\x00", "\x0c", "\xa0", " ", "\ufeff", "<", ">", "&", '"', "'", "`", "="]


def random_string(min_len=0, max_len=20):
    """Generate random ASCII string."""
    length = random.randint(min_len, max_len)
    return "".join(random.choices(string.ascii_letters + string.digits, k=length))


def fuzz_attribute():
    name = random.choice(ATTRIBUTES)
    if random.random() < 0.2:
        name = name.upper()
    if name.lower() == "style":
        value = random.choice(STYLE_VALUES)
    elif name.lower() in ("href", "src", "ping", "xlink:href", "formaction", "srcdoc"):
        value = random.choice(URL_VALUES)
    else:
        value = random_string() + random.choice(SPECIAL_CHARS)
    quote = random.choice(['"', "'", ""])
    if not quote and any(c in value for c in " \"'=<>`"):
        quote = '"'
    return f" {name}={quote}{value}{quote}"


def fuzz_open_tag():
    tag = random.choice(TAGS)
    attrs = "".join(fuzz_attribute() for _ in range(random.randint(0, 4)))
    closing = random.choice([">", "/>", ">", ""])
    return f"<{tag}{attrs}{closing}"


def fuzz_close_tag():
    return f"</{random.choice(TAGS)}>"


def fuzz_comment():
    return random.choice([
        f"<!--{random_string()}-->",
        f"<!--{fuzz_open_tag()}-->",
        "<!-->",
        "<!--->",
        f"<!--{random_string()}",
        f"<!{random_string()}>",
    ])


def fuzz_text():
    return random_string() + random.choice(SPECIAL_CHARS) + random_string(0, 5)


def fuzz_nested_structure(depth=0, max_depth=8):
    if depth >= max_depth or random.random() < 0.3:
        return fuzz_text()
    tag = random.choice(TAGS)
    inner = "".join(fuzz_nested_structure(depth + 1, max_depth) for _ in range(random.randint(0, 3)))
    attrs = "".join(fuzz_attribute() for _ in range(random.randint(0, 2)))
    return f"<{tag}{attrs}>{inner}</{tag}>"


def generate_fuzzed_html():
    """Generate a fuzzed fragment by combining random elements."""
    element_types = [
        fuzz_open_tag,
        fuzz_close_tag,
        fuzz_comment,
        fuzz_text,
        fuzz_nested_structure,
    ]
    parts = []
    for _ in range(random.randint(1, 20)):
        parts.append(random.choice(element_types)())
    return "".join(parts)


def check_whitelisted(html):
    """Return a description of the first non-whitelisted construct in `html`, or None."""
    stack = [parse_fragment(html)]
    while stack:
        node = stack.pop()
        stack.extend(node.children)
        if node.name == "#comment":
            return "comment survived"
        if not isinstance(node, ElementNode):
            continue
        if node.name not in DEFAULT_POLICY.tags:
            return f"tag <{node.name}> survived"
        for attr in node.attrs:
            if attr != "style" and attr not in DEFAULT_POLICY.tags[node.name]:
                return f"attribute {attr!r} survived on <{node.name}>"
        for prop in node.style:
            if prop not in DEFAULT_POLICY.css:
                return f"CSS property {prop!r} survived on <{node.name}>"
    return None


def run_fuzzer(num_tests, seed=None, escape=True, verbose=False, save_failures=False):
    """Run the fuzzer against the sanitizer."""
    if seed is not None:
        random.seed(seed)

    failures = []
    successes = 0

    print(f"Fuzzing sanitize(escape={escape}) with {num_tests} test cases...")
    start_time = time.time()

    for i in range(num_tests):
        html = generate_fuzzed_html()

        if verbose and i % 100 == 0:
            print(f"  Test {i}/{num_tests}...")

        try:
            once = sanitize(html, escape=escape)
            twice = sanitize(once, escape=escape)
        except Exception as e:
            failures.append({"test_num": i, "html": html, "error": f"crash: {e}", "traceback": traceback.format_exc()})
            if verbose:
                print(f"  CRASH: Test {i}: {e}")
            continue

        problem = check_whitelisted(once)
        if problem is None and once != twice:
            problem = f"not idempotent: {once!r} -> {twice!r}"
        if problem is not None:
            failures.append({"test_num": i, "html": html, "error": problem, "traceback": ""})
            if verbose:
                print(f"  FAIL: Test {i}: {problem}")
            continue

        successes += 1

    elapsed_total = time.time() - start_time

    print(f"\n{'='*60}")
    print("FUZZING RESULTS")
    print(f"{'='*60}")
    print(f"Total tests:    {num_tests}")
    print(f"Successes:      {successes}")
    print(f"Failures:       {len(failures)}")
    print(f"Total time:     {elapsed_total:.2f}s")
    print(f"Tests/second:   {num_tests/elapsed_total:.1f}")

    if failures:
        print(f"\n{'='*60}")
        print("FAILURE DETAILS:")
        print(f"{'='*60}")
        for failure in failures[:10]:  # Show first 10
            print(f"\nTest #{failure['test_num']}:")
            print(f"  HTML: {failure['html'][:200]!r}...")
            print(f"  Error: {failure['error'][:300]}")
        if len(failures) > 10:
            print(f"\n... and {len(failures) - 10} more failures")

    if save_failures and failures:
        filename = f"fuzz_failures_{int(time.time())}.txt"
        with open(filename, "w") as f:
            f.write(f"Seed: {seed}\n\n")
            for failure in failures:
                f.write(f"=== FAILURE #{failure['test_num']} ===\n")
                f.write(f"HTML:\n{failure['html']}\n")
                f.write(f"Error: {failure['error']}\n")
                if failure["traceback"]:
                    f.write(f"Traceback:\n{failure['traceback']}\n")
                f.write("\n")
        print(f"\nFailures saved to {filename}")

    return not failures


def main():
    parser = argparse.ArgumentParser(description="Fuzz the whitelist sanitizer with hostile input")
    parser.add_argument(
        "--num-tests", "-n",
        type=int,
        default=1000,
        help="Number of test cases to generate (default: 1000)",
    )
    parser.add_argument(
        "--seed", "-s",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--strip",
        action="store_true",
        help="Drop disallowed elements instead of escaping them",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "--save-failures",
        action="store_true",
        help="Save failures to a file",
    )
    parser.add_argument(
        "--sample",
        type=int,
        metavar="N",
        help="Just print N sample fuzzed HTML fragments (no sanitizing)",
    )

    args = parser.parse_args()

    if args.sample:
        if args.seed:
            random.seed(args.seed)
        for i in range(args.sample):
            print(f"=== Sample {i+1} ===")
            print(generate_fuzzed_html())
            print()
        return

    success = run_fuzzer(
        args.num_tests,
        seed=args.seed,
        escape=not args.strip,
        verbose=args.verbose,
        save_failures=args.save_failures,
    )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
