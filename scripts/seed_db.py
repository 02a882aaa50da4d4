from __future__ import annotations

import logging
from dataclasses import replace

from dotenv import load_dotenv

from edumanage.auth.credentials import CredentialChecker
from edumanage.config import get_settings_module, load_config
from edumanage.core.constants import DEMO_PASSWORD
from edumanage.storage.factory import build_storage
from edumanage.storage.fixtures import seed_sample_data


def main() -> None:
    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # Seeding is this script's job, so the setting is forced off for construction.
    config = replace(load_config(), seed_sample_data=False)
    storage = build_storage(config)

    password_hash = CredentialChecker.default().hash_password(DEMO_PASSWORD)
    if seed_sample_data(storage, password_hash=password_hash):
        print(f"OK: Seeded {storage.name} store (settings={get_settings_module()}); demo password is {DEMO_PASSWORD!r}")
    else:
        print(f"SKIP: {storage.name} store already has users")


if __name__ == "__main__":
    main()
