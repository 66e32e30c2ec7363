"""
Main CDK Stack for the support ticket relay.
"""

from aws_cdk import (
    Stack,
    Tags,
    CfnOutput,
    aws_secretsmanager as secretsmanager,
)
from constructs import Construct

from infrastructure.constructs.api_layer import ApiLayerConstruct
from infrastructure.config.settings import Settings


class TicketRelayStack(Stack):
    """Main stack wiring the relay Lambda, its API and its credentials secret."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        settings: Settings,
        **kwargs,
    ) -> None:
        super().__init__(scope, construct_id, **kwargs)

        # Global tags for cost/accounting.
        Tags.of(self).add("Project", "support-ticket-relay")
        Tags.of(self).add("Environment", settings.environment)
        Tags.of(self).add("CostCenter", "support-automation")
        Tags.of(self).add("ManagedBy", "cdk")

        # 1) Credentials (helpdesk org id, commerce token) filled in after deploy.
        app_secret = secretsmanager.Secret(
            self,
            "RelaySecret",
            secret_name=f"ticket-relay/{settings.environment}",
            description="desk_org_id, commerce_api_token and token_service_url overrides",
        )

        # 2) API layer (single Lambda).
        api_construct = ApiLayerConstruct(
            self,
            "ApiLayer",
            environment=settings.environment,
            lambda_environment={
                "APP_SECRET_ARN": app_secret.secret_arn,
                "DESK_DOMAIN": settings.desk_domain,
                "DISPATCH_MODE": settings.dispatch_mode,
                "TICKET_CHANNEL": settings.ticket_channel,
                "ALLOWED_ORIGINS": ",".join(settings.allowed_origins),
                "TOKEN_SERVICE_URL": settings.token_service_url,
                "COMMERCE_API_URL": settings.commerce_api_url,
                "LOG_LEVEL": settings.log_level,
            },
            lambda_memory_mb=settings.lambda_memory_mb,
            lambda_timeout_seconds=settings.lambda_timeout_seconds,
        )

        app_secret.grant_read(api_construct.main_lambda)

        # Outputs to quickly find resources.
        CfnOutput(self, "ApiEndpoint", value=api_construct.api.api_endpoint)
        CfnOutput(self, "RelaySecretArn", value=app_secret.secret_arn)
