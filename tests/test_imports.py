# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_define
def test_import_coreason_define_package() -> None:
    """Tests that the main application package is importable."""
    try:
        import coreason_define  # noqa: F401
        from coreason_define.aio import require  # noqa: F401
        from coreason_define.sandbox import Sandbox  # noqa: F401
    except ImportError as e:
        assert False, f"Failed to import from the 'coreason_define' package: {e}"


def test_version() -> None:
    import coreason_define

    assert coreason_define.__version__ == "0.1.0"
