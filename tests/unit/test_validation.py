# tests/unit/test_validation.py
"""测试 pydantic 字段校验适配器。"""

import uuid
from collections.abc import Generator
from typing import Annotated, Optional

import pytest
from pydantic import BaseModel, ValidationError

from tid import ConfigurationError, InvalidArgumentError, Mode, Tid
from tid.validation import get_default_codec, set_default_codec, valid_tid


class OrderRef(BaseModel):
    order_id: Annotated[Optional[uuid.UUID], valid_tid("order")] = None


@pytest.fixture
def default_codec(codec: Tid) -> Generator[Tid, None, None]:
    set_default_codec(codec)
    yield codec
    set_default_codec(None)


def test_valid_identifier_is_accepted(default_codec: Tid) -> None:
    u = default_codec.generate("order", Mode.TIME_SORTED, 2)
    assert OrderRef(order_id=u).order_id == u
    assert OrderRef(order_id=str(u)).order_id == u


def test_none_passes_through(default_codec: Tid) -> None:
    assert OrderRef().order_id is None
    assert OrderRef(order_id=None).order_id is None


def test_wrong_type_is_a_validation_error(default_codec: Tid) -> None:
    u = default_codec.generate("ordes", Mode.RANDOM, 2)
    with pytest.raises(ValidationError, match="Tid verification failed"):
        OrderRef(order_id=u)


def test_tampered_tag_is_a_validation_error(default_codec: Tid) -> None:
    u = default_codec.generate("order", Mode.RANDOM, 2)
    raw = bytearray(u.bytes)
    raw[14] ^= 0x01
    with pytest.raises(ValidationError):
        OrderRef(order_id=uuid.UUID(bytes=bytes(raw)))


def test_missing_codec_is_a_configuration_error() -> None:
    assert get_default_codec() is None
    u = Tid({0: "topSecret"}).generate("order", Mode.RANDOM, 1)
    with pytest.raises(ConfigurationError):
        OrderRef(order_id=u)


def test_explicit_codec_overrides_default(default_codec: Tid) -> None:
    other = Tid({3: "elsewhere"})

    class InvoiceRef(BaseModel):
        invoice_id: Annotated[uuid.UUID, valid_tid(b"invoice", codec=other)]

    u = other.generate(b"invoice", Mode.TIME_SORTED, 2)
    assert InvoiceRef(invoice_id=u).invoice_id == u

    with pytest.raises(ValidationError):
        InvoiceRef(invoice_id=default_codec.generate(b"invoice", Mode.TIME_SORTED, 2))


def test_oversized_label_fails_when_building_the_validator() -> None:
    with pytest.raises(InvalidArgumentError):
        valid_tid("x" * 256)
