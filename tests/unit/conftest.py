from __future__ import annotations

import io
import random

import pytest

from jmeter_aggregator import logger


@pytest.fixture
def log_messages():
    """
    Capture package log records as (level, message) tuples.
    """
    messages: list[tuple[str, str]] = []
    logger.enable("jmeter_aggregator")
    handler_id = logger.add(
        lambda message: messages.append(
            (message.record["level"].name, message.record["message"])
        ),
        level="DEBUG",
    )
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


def nested_sample(
    location: str = "/api/user/1",
    timestamp: int = 1000,
    success: bool = True,
    label: str = "Checkout",
    elapsed: int = 50,
    all_threads: int = 1,
    response_code: int | str = 200,
    element: str = "sample",
) -> str:
    return (
        f"<{element}>"
        f"<location>{location}</location>"
        f"<timeStamp>{timestamp}</timeStamp>"
        f"<success>{str(success).lower()}</success>"
        f"<label>{label}</label>"
        f"<elapsedTime>{elapsed}</elapsedTime>"
        f"<allThreads>{all_threads}</allThreads>"
        f"<responseCode>{response_code}</responseCode>"
        f"</{element}>"
    )


def flat_sample(
    label: str = "/api/user/1",
    timestamp: int = 1000,
    elapsed: int = 50,
    byte_count: int = 512,
    all_threads: int = 1,
    success: bool = True,
    response_code: int | str = 200,
    thread_name: str = "Checkout 1-1",
    element: str = "httpSample",
) -> str:
    return (
        f'<{element} t="{elapsed}" ts="{timestamp}" s="{str(success).lower()}" '
        f'lb="{label}" rc="{response_code}" tn="{thread_name}" by="{byte_count}" '
        f'na="{all_threads}"/>'
    )


def result_document(*samples: str) -> io.StringIO:
    return io.StringIO(
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<testResults version="1.2">\n' + "\n".join(samples) + "\n</testResults>\n"
    )


@pytest.fixture
def nested_sample_factory():
    return nested_sample


@pytest.fixture
def flat_sample_factory():
    return flat_sample


@pytest.fixture
def document_factory():
    return result_document
