"""
Test script to verify whitelist and validation settings are properly saved and
loaded from INI files.
"""
import os
import tempfile

from core.config import Config, DataEncrConfig, RequiredFieldsConfig, ValidationConfig, ValidationPolicy, WhitelistConfig


def test_filter_config_roundtrip():
    """Test that tables and policy survive a save/load cycle."""

    # Create config with custom tables
    config1 = Config(
        whitelist=WhitelistConfig(client=('id', 'pregnancies', 'region')),
        data_encr=DataEncrConfig(
            child=('birth_date',),
            care_after_dynamic_patterns=('kind-{id}-nahrung', 'baby-{id}-gewicht'),
        ),
        validation=ValidationConfig(
            policy=ValidationPolicy.STRICT,
            required=RequiredFieldsConfig(pregnancy=('birth', 'cares_after'), pregnancy_non_empty_arrays=False),
        ),
    )

    # Save to temporary INI file
    with tempfile.NamedTemporaryFile(mode='w', suffix='.ini', delete=False) as f:
        temp_path = f.name

    try:
        config1.to_ini(temp_path)
        print(f"✓ Saved config to {temp_path}")

        # Load from INI file
        config2 = Config.from_ini(temp_path)
        print(f"✓ Loaded config from {temp_path}")

        assert config2.policy is ValidationPolicy.STRICT, \
            f"policy mismatch: expected strict, got {config2.policy}"
        print(f"✓ policy: {config2.policy.value}")

        assert config2.validation.required == config1.validation.required, \
            f"required mismatch: {config2.validation.required}"
        print(f"✓ required: {config2.validation.required}")

        assert config2.whitelist == config1.whitelist, \
            f"whitelist mismatch: {config2.whitelist}"
        print(f"✓ whitelist.client: {config2.whitelist.client}")

        assert config2.data_encr == config1.data_encr, \
            f"data_encr mismatch: {config2.data_encr}"
        print(f"✓ data_encr patterns: {config2.data_encr.care_after_dynamic_patterns}")

        assert config2 == config1

    finally:
        # Cleanup
        if os.path.exists(temp_path):
            os.unlink(temp_path)
            print(f"\n✓ Cleaned up temporary file")


def test_default_config_roundtrip_keeps_policy_defaults():
    """Without explicit required fields the policy defaults stay in charge."""
    with tempfile.NamedTemporaryFile(mode='w', suffix='.ini', delete=False) as f:
        temp_path = f.name

    try:
        Config().to_ini(temp_path)
        loaded = Config.from_ini(temp_path)

        assert loaded.validation.required is None
        assert loaded == Config()
    finally:
        if os.path.exists(temp_path):
            os.unlink(temp_path)


if __name__ == '__main__':
    test_filter_config_roundtrip()
    test_default_config_roundtrip_keeps_policy_defaults()
