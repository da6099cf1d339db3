"""Shared test data: dev-chain addresses and a valid config document."""

import textwrap

# Substrate dev accounts (generic prefix 42)
ALICE = "5GrwvaEF5zXb26Fz9rcQpDWS57CtERHpNehXCPcNoHGKutQY"
BOB = "5FHneW46xGXgs5mUiveU4sbTyGBzmstUspZC92UhjJM694ty"

VALID_CONFIG = textwrap.dedent("""\
    [bittensor]
    network = "finney"
    netuid = 3
    wallet_name = "test"
    hotkey_name = "default"
    probe_endpoint = false

    [emission]
    burn_uid = 7
    burn_percentage = 12.5
    weight_set_interval_blocks = 360

    [database]
    url = "postgresql://validator:secret@db:5432/validator"
""")
