"""The PII gate must pass on the source tree and catch obvious leaks."""

from pathlib import Path

from scripts.gate_security_pii import check_file

SRC = Path(__file__).parent.parent / "src"


def test_source_tree_is_clean():
    errors = []
    for pyfile in sorted(SRC.rglob("*.py")):
        errors.extend(check_file(pyfile))
    assert errors == []


def test_unredacted_phone_flagged(tmp_path):
    module = tmp_path / "leaky.py"
    module.write_text(
        "logger.info(\n"
        '    "sending",\n'
        '    extra={"extra_fields": {"phone": phone}},\n'
        ")\n",
        encoding="utf-8",
    )

    errors = check_file(module)

    assert len(errors) == 1
    assert "'phone'" in errors[0]
    assert "leaky.py:1" in errors[0]


def test_redacted_call_passes(tmp_path):
    module = tmp_path / "ok.py"
    module.write_text(
        'logger.info("received", extra={"extra_fields": safe_log_context(body=payload)})\n',
        encoding="utf-8",
    )
    assert check_file(module) == []


def test_print_flagged(tmp_path):
    module = tmp_path / "noisy.py"
    module.write_text("print(order)\n", encoding="utf-8")
    assert "print()" in check_file(module)[0]
