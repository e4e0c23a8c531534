from pychainlibs.serialization import CBORSerializable

TEST_TX_ID = "732bfd67e66be8e8288349fcaaa2294973ef6271cc189a239bb431275401b8e5"

TEST_SK_HEX = "093be5cd3987d0c9fd8854ef908f7746b69e2d73320db6dc0f780d81585b84c2"

TEST_VK_HEX = "8be8339e9f3addfa6810d59e2f072f85e64d4c024c087e0d24f8317c6544f62f"


def check_two_way_cbor(serializable: CBORSerializable):
    restored = serializable.from_cbor(serializable.to_cbor())
    assert restored == serializable
