import asyncio

from spake2kit.protocol import spake2, spake2_plus
from spake2kit.types import MhfOptions, ProtocolOptions


async def run_exchange(plus: bool) -> bytes:
    options = ProtocolOptions(mhf=MhfOptions(n=1024, r=8, p=1))
    protocol = spake2_plus(options) if plus else spake2(options)

    password = b"password123"
    salt = b"NaCl"
    idA = b"client1337@cam.ac.uk"
    idB = b"server1337@cam.ac.uk"

    verifier = await protocol.compute_verifier(password, salt, idA, idB)
    alice = await protocol.start_client(idA, idB, password, salt)
    bob = protocol.start_server(idA, idB, verifier)

    alice_msg = alice.get_message()
    bob_msg = bob.get_message()

    alice_secret = alice.finish(bob_msg)
    bob_secret = bob.finish(alice_msg)

    bob_secret.verify(alice_secret.get_confirmation())
    alice_secret.verify(bob_secret.get_confirmation())

    assert alice_secret.shared_key == bob_secret.shared_key
    return alice_secret.shared_key


if __name__ == "__main__":
    for plus in (False, True):
        key = asyncio.run(run_exchange(plus))
        print(f"{'SPAKE2+' if plus else 'SPAKE2'} shared key: {key.hex()}")
