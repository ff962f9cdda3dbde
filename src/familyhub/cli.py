"""CLI entry point for familyhub."""

import click

from .commands import admin, auth, experiences, forum, init, serve, wallet


@click.group()
@click.version_option(version="0.1.0", prog_name="familyhub")
def main():
    """familyhub: family activities marketplace.

    Host bookable experiences, manage their dates, moderate the forum and
    track your balance.

    Example usage:

        # Initialize the project
        familyhub init

        # Create an account and sign in
        familyhub auth signup you@example.com

        # Create a draft experience
        familyhub experiences create --title "Pottery for kids" --price 15

        # Start the web interface
        familyhub serve
    """
    pass


# Register commands
main.add_command(init)
main.add_command(serve)
main.add_command(auth)
main.add_command(experiences)
main.add_command(forum)
main.add_command(wallet)
main.add_command(admin)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
