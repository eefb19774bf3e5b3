import unittest

from spake2kit.states import ClientPlusState, ClientState, ServerPlusState, ServerState

SUITE = "P256-SHA256-HKDF-SHA256-HMAC-SHA256"


class TestRFC9382Vector(unittest.TestCase):
    """RFC 9382 Appendix B, SPAKE2-P256-SHA256-HKDF-SHA256-HMAC-SHA256."""

    w = "2ee57912099d31560b3a44b1184b9b4866e904c49d12ac5042c97dca461b1a5f"
    x = "43dd0fd7215bdcb482879fca3220c6a968e66d70b1356cac18bb26c84a78d729"
    y = "dcb60106f276b02606d8ef0a328c02e4b629f84f89786af5befb0bc75b6e66be"

    shareP = (
        "04a56fa807caaa53a4d28dbb9853b9815c61a411118a6fe516a8798434751470f9"
        "010153ac33d0d5f2047ffdb1a3e42c9b4e6be662766e1eeb4116988ede5f912c"
    )
    shareV = (
        "0406557e482bd03097ad0cbaa5df82115460d951e3451962f1eaf4367a420676d0"
        "9857ccbc522686c83d1852abfa8ed6e4a1155cf8f1543ceca528afb591a1e0b7"
    )
    K = (
        "0412af7e89717850671913e6b469ace67bd90a4df8ce45c2af19010175e37eed69"
        "f75897996d539356e2fa6a406d528501f907e04d97515fbe83db277b715d3325"
    )
    hash_transcript = "0e0672dc86f8e45565d338b0540abe6915bdf72e2b35b5c9e5663168e960a91b"
    confirmation_client = "58ad4aa88e0b60d5061eb6b5dd93e80d9c4f00d127c65b3b35b1b5281fee38f0"
    confirmation_server = "d3e2e547f1ae04f2dbdbf0fc4b79f8ecff2dff314b5d32fe9fcef2fb26dc459b"
    shared_key = "0e0672dc86f8e45565d338b0540abe69"

    def setUp(self) -> None:
        # The RFC names A "server" and B "client"
        common = {
            "options": {"suite": SUITE, "kdf": {"aad": ""}},
            "client_identity": b"server",
            "server_identity": b"client",
            "w": self.w,
        }
        self.client = ClientState.load({**common, "x": self.x})
        self.server = ServerState.load({**common, "y": self.y})

    def expected_transcript(self) -> str:
        return (
            "0600000000000000" + b"server".hex()
            + "0600000000000000" + b"client".hex()
            + "4100000000000000" + self.shareP
            + "4100000000000000" + self.shareV
            + "4100000000000000" + self.K
            + "2000000000000000" + self.w
        )

    def test_vector(self):
        message_a = self.client.get_message()
        message_b = self.server.get_message()
        self.assertEqual(message_a.hex(), self.shareP)
        self.assertEqual(message_b.hex(), self.shareV)

        server_secret = self.server.finish(message_a)
        client_secret = self.client.finish(message_b)

        for secret in (client_secret, server_secret):
            self.assertEqual(secret.transcript.hex(), self.expected_transcript())
            self.assertEqual(secret.get_transcript_hash().hex(), self.hash_transcript)
            self.assertEqual(secret.shared_key.hex(), self.shared_key)

        confirmation_client = client_secret.get_confirmation()
        self.assertEqual(confirmation_client.hex(), self.confirmation_client)
        server_secret.verify(confirmation_client)

        confirmation_server = server_secret.get_confirmation()
        self.assertEqual(confirmation_server.hex(), self.confirmation_server)
        client_secret.verify(confirmation_server)


class TestRFC9383Vector(unittest.TestCase):
    """RFC 9383 Appendix C, SPAKE2+-P256-SHA256-HKDF-SHA256-HMAC-SHA256."""

    context = b"SPAKE2+-P256-SHA256-HKDF-SHA256-HMAC-SHA256 Test Vectors"
    w0 = "bb8e1bbcf3c48f62c08db243652ae55d3e5586053fca77102994f23ad95491b3"
    w1 = "7e945f34d78785b8a3ef44d0df5a1a97d6b3b460409a345ca7830387a74b1dba"
    L = (
        "04eb7c9db3d9a9eb1f8adab81b5794c1f13ae3e225efbe91ea487425854c7fc00f"
        "00bfedcbd09b2400142d40a14f2064ef31dfaa903b91d1faea7093d835966efd"
    )
    x = "d1232c8e8693d02368976c174e2088851b8365d0d79a9eee709c6a05a2fad539"
    y = "717a72348a182085109c8d3917d6c43d59b224dc6a7fc4f0483232fa6516d8b3"

    M = (
        "04886e2f97ace46e55ba9dd7242579f2993b64e16ef3dcab95afd497333d8fa12f"
        "5ff355163e43ce224e0b0e65ff02ac8e5c7be09419c785e0ca547d55a12e2d20"
    )
    N = (
        "04d8bbd6c639c62937b04d997f38c3770719c629d7014d49a24b4f98baa1292b49"
        "07d60aa6bfade45008a636337f5168c64d9bd36034808cd564490b1e656edbe7"
    )
    shareP = (
        "04ef3bd051bf78a2234ec0df197f7828060fe9856503579bb1733009042c15c0c1"
        "de127727f418b5966afadfdd95a6e4591d171056b333dab97a79c7193e341727"
    )
    shareV = (
        "04c0f65da0d11927bdf5d560c69e1d7d939a05b0e88291887d679fcadea75810fb"
        "5cc1ca7494db39e82ff2f50665255d76173e09986ab46742c798a9a68437b048"
    )
    Z = (
        "04bbfce7dd7f277819c8da21544afb7964705569bdf12fb92aa388059408d50091"
        "a0c5f1d3127f56813b5337f9e4e67e2ca633117a4fbd559946ab474356c41839"
    )
    V = (
        "0458bf27c6bca011c9ce1930e8984a797a3419797b936629a5a937cf2f11c8b951"
        "4b82b993da8a46e664f23db7c01edc87faa530db01c2ee405230b18997f16b68"
    )
    hash_transcript = "4c59e1ccf2cfb961aa31bd9434478a1089b56cd11542f53d3576fb6c2a438a29"
    k_confirm_p = "871ae3f7b78445e34438fb284504240239031c39d80ac23eb5ab9be5ad6db58a"
    k_confirm_v = "ccd53c7c1fa37b64a462b40db8be101cedcf838950162902054e644b400f1680"
    confirmation_client = "926cc713504b9b4d76c9162ded04b5493e89109f6d89462cd33adc46fda27527"
    confirmation_server = "9747bcc4f8fe9f63defee53ac9b07876d907d55047e6ff2def2e7529089d3e68"
    shared_key = "0c5f8ccd1413423a54f6c1fb26ff01534a87f893779c6e68666d772bfd91f3e7"

    def setUp(self) -> None:
        common = {
            "options": {"suite": SUITE, "plus": True, "context": self.context.hex()},
            "client_identity": b"client",
            "server_identity": b"server",
            "w0": self.w0,
        }
        self.client = ClientPlusState.load({**common, "x": self.x, "w1": self.w1})
        self.server = ServerPlusState.load({**common, "y": self.y, "L": self.L})

    def expected_transcript(self) -> str:
        return (
            "3800000000000000" + self.context.hex()
            + "0600000000000000" + b"client".hex()
            + "0600000000000000" + b"server".hex()
            + "4100000000000000" + self.M
            + "4100000000000000" + self.N
            + "4100000000000000" + self.shareP
            + "4100000000000000" + self.shareV
            + "4100000000000000" + self.Z
            + "4100000000000000" + self.V
            + "2000000000000000" + self.w0
        )

    def test_vector(self):
        share_p = self.client.get_message()
        share_v = self.server.get_message()
        self.assertEqual(share_p.hex(), self.shareP)
        self.assertEqual(share_v.hex(), self.shareV)

        server_secret = self.server.finish(share_p)
        client_secret = self.client.finish(share_v)

        for secret in (client_secret, server_secret):
            self.assertEqual(secret.transcript.hex(), self.expected_transcript())
            self.assertEqual(secret.get_transcript_hash().hex(), self.hash_transcript)
            self.assertEqual(secret.k_confirm_p.hex(), self.k_confirm_p)
            self.assertEqual(secret.k_confirm_v.hex(), self.k_confirm_v)
            self.assertEqual(secret.shared_key.hex(), self.shared_key)

        confirmation_client = client_secret.get_confirmation()
        self.assertEqual(confirmation_client.hex(), self.confirmation_client)
        server_secret.verify(confirmation_client)

        confirmation_server = server_secret.get_confirmation()
        self.assertEqual(confirmation_server.hex(), self.confirmation_server)
        client_secret.verify(confirmation_server)


if __name__ == "__main__":
    unittest.main()
