import protodiff


def test_public_api_exports_are_importable() -> None:
    for name in protodiff.__all__:
        assert hasattr(protodiff, name), name


def test_public_api_compares_records() -> None:
    from protodiff.schema.demo import build_demo_message

    assert protodiff.diff_records(build_demo_message(), build_demo_message()) is None
    protodiff.assert_equal(build_demo_message(), build_demo_message())
