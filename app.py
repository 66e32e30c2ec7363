"""
CDK app entrypoint.

Creates the ticket relay stack. A single Python Lambda behind an HTTP API
relays support tickets to the helpdesk; its credentials live in a Secrets
Manager secret. Deployment settings are read from the environment.
"""

import aws_cdk as cdk

from infrastructure.config.settings import Settings
from infrastructure.main_stack import TicketRelayStack


def main() -> None:
    """Instantiate the CDK app and stack."""
    settings = Settings.from_environment()
    app = cdk.App()

    TicketRelayStack(
        app,
        f"TicketRelayStack-{settings.environment}",
        settings=settings,
        env=cdk.Environment(
            account=app.node.try_get_context("account"),
            region=settings.aws_region,
        ),
    )

    app.synth()


if __name__ == "__main__":
    main()
