import io
import logging

from roocode_generator.utils import logging as utils_logging


def test_setup_logging_configures_root_with_emoji_formatter():
    buf = io.StringIO()
    utils_logging.setup_logging(level=logging.DEBUG, stream=buf)

    root = logging.getLogger()
    assert len(root.handlers) == 1

    log = utils_logging.get_logger("test_mod")
    log.info("hello world")

    out = buf.getvalue()
    assert "💡 [INFO" in out
    assert "(roocode.test_mod)" in out
    assert "hello world" in out


def test_setup_logging_is_idempotent_replaces_handler():
    buf1 = io.StringIO()
    utils_logging.setup_logging(level=logging.INFO, stream=buf1)

    buf2 = io.StringIO()
    utils_logging.setup_logging(level=logging.INFO, stream=buf2)

    utils_logging.get_logger("another_mod").warning("warn msg")

    assert buf1.getvalue() == ""
    assert "⚠️ [WARNING" in buf2.getvalue()
    assert "warn msg" in buf2.getvalue()


def test_extra_fields_are_appended():
    buf = io.StringIO()
    utils_logging.setup_logging(level=logging.INFO, stream=buf)

    utils_logging.get_logger("extra").info("with extra", extra={"provider": "openai"})

    assert "with extra | provider='openai'" in buf.getvalue()


def test_secrets_are_redacted_from_output():
    buf = io.StringIO()
    utils_logging.setup_logging(level=logging.DEBUG, stream=buf)

    log = utils_logging.get_logger("secrets")
    log.debug("GET https://example.test/v1beta/models?key=AIzaSecret123&pageSize=10")
    log.debug("Authorization: Bearer or-abcdef123456")
    log.debug("using sk-proj-abcdefghijklmnop")

    out = buf.getvalue()
    assert "AIzaSecret123" not in out
    assert "key=[REDACTED_API_KEY]&pageSize=10" in out
    assert "or-abcdef123456" not in out
    assert "sk-proj-abcdefghijklmnop" not in out


def test_redact_secrets_leaves_plain_text_alone():
    text = "Resolved LLM provider 'openai' (model: gpt-4o)"
    assert utils_logging.redact_secrets(text) == text


def test_httpx_logger_is_quieted():
    utils_logging.setup_logging(level=logging.DEBUG, stream=io.StringIO())
    assert logging.getLogger("httpx").level == logging.WARNING


def test_parse_log_level():
    assert utils_logging.parse_log_level("debug") == logging.DEBUG
    assert utils_logging.parse_log_level("WARNING") == logging.WARNING
    assert utils_logging.parse_log_level("nonsense", logging.ERROR) == logging.ERROR
    assert utils_logging.parse_log_level(None) == logging.INFO
    assert utils_logging.parse_log_level(logging.CRITICAL) == logging.CRITICAL
