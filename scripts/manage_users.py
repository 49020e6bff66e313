"""Create, update, delete and list PrisonSphere staff accounts."""

import argparse
import asyncio
import getpass
import os
import sys

local_dir = os.path.dirname(os.path.realpath(__file__))  # noqa
sys.path.append(os.path.join(local_dir, os.path.pardir))  # noqa

# pylint: disable=import-error, wrong-import-position
from prisonsphere import accounts, db
from prisonsphere.errors import PrisonSphereError


def read_password(args) -> str:
    """Take the password from the arguments or prompt for it."""
    if args.password:
        return args.password
    return getpass.getpass("Password: ")


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(description=__doc__)
    commands = parser.add_subparsers(dest="command", required=True)

    create = commands.add_parser("create", help="create an account")
    create.add_argument("username")
    create.add_argument("--password")
    create.add_argument("--role", choices=accounts.ROLES, default="admin")

    update = commands.add_parser("update", help="change password or role")
    update.add_argument("username")
    update.add_argument("--password")
    update.add_argument("--role", choices=accounts.ROLES)

    delete = commands.add_parser("delete", help="remove an account")
    delete.add_argument("username")

    commands.add_parser("list", help="list accounts")
    return parser


async def run(args) -> int:
    """Execute the selected command."""
    async with db.async_session() as session:
        try:
            if args.command == "create":
                user = await accounts.create_user(
                    session, args.username, read_password(args), args.role
                )
                print(f"Created {user.role} '{user.username}'")
            elif args.command == "update":
                user = await accounts.update_user(
                    session, args.username, password=args.password, role=args.role
                )
                print(f"Updated '{user.username}' ({user.role})")
            elif args.command == "delete":
                await accounts.delete_user(session, args.username)
                print(f"Deleted '{args.username}'")
            else:
                for user in await accounts.list_users(session):
                    print(f"{user.username}\t{user.role}")
        except PrisonSphereError as error:
            print(error.message, file=sys.stderr)
            return 1
    return 0


def main():
    """Manage PrisonSphere staff accounts."""
    args = build_parser().parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
