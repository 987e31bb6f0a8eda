import numpy as np
import pytest

from legtensor import Tensor, TensorConfig


def test_config_normalization_lowers_and_canonicalizes():
    cfg = TensorConfig(zip_check="SHAPE", default_dtype="f4", check_bounds=0).normalized()
    assert cfg.zip_check == "shape"
    assert cfg.default_dtype == "float32"
    assert cfg.check_bounds is False


def test_config_rejects_unknown_zip_check():
    with pytest.raises(ValueError, match="Unsupported zip check"):
        TensorConfig(zip_check="axes").normalized()


def test_config_rejects_unknown_dtype():
    with pytest.raises(ValueError, match="Unsupported default dtype"):
        TensorConfig(default_dtype="not-a-dtype").normalized()


def test_tensor_uses_config_default_dtype(registry):
    tensor = Tensor([2], ["A"], registry=registry, config=TensorConfig(default_dtype="complex128"))
    assert tensor.dtype == np.complex128
    assert Tensor([2], ["A"], dtype="int8", registry=registry).dtype == np.int8


def test_invalid_config_fails_at_construction(registry):
    with pytest.raises(ValueError):
        Tensor([2], ["A"], registry=registry, config=TensorConfig(zip_check="loose"))
