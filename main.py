import asyncio
import logging

from config.backend import BackendConfig
from registration.listing import RegistrationListController
from registration.shell import NavigationShell


async def main():
    # load backend config
    config = BackendConfig.from_env()
    print("Backend:", config.registrations_url)

    # start the shell on the list view
    async with NavigationShell.from_config(config) as shell:
        listing = shell.controller
        if not isinstance(listing, RegistrationListController):
            print("Unexpected view:", shell.view)
            return

        if listing.notice:
            print("Could not load registrations:", listing.notice)
            return

        print(f"\n{len(listing.snapshot)} registration(s)")
        for record in listing.snapshot:
            print(
                f"- {record.id}  {record.name}  age={record.age}  "
                f"{record.email}  {record.mobile_number}  {record.occupation}"
            )
            photo = listing.photo_url(record)
            if photo:
                print(f"    photo: {photo}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")
    asyncio.run(main())
