"""
API layer construct: relay Lambda + HTTP API routes.

Every path and method is sent to the Lambda so CORS preflight, 404 and 405
responses come from the handler rather than from API Gateway.
Uses Docker bundling for dependencies (runs in CI/CD pipeline).
"""

from typing import Dict, List

from aws_cdk import (
    ArnFormat,
    BundlingOptions,
    Duration,
    Stack,
    aws_iam as iam,
    aws_lambda as _lambda,
    aws_apigatewayv2 as apigw,
    aws_apigatewayv2_integrations as integrations,
    aws_logs as logs,
)
from constructs import Construct


class ApiLayerConstruct(Construct):
    """Expose the ticket relay via HTTP API."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        *,
        environment: str,
        lambda_environment: Dict[str, str],
        lambda_memory_mb: int = 256,
        lambda_timeout_seconds: int = 15,
    ) -> None:
        super().__init__(scope, construct_id)
        function_name = f"ticket-relay-{environment}"

        # Bundle Lambda code with httpx/pydantic/python-json-logger using Docker.
        bundled_code = _lambda.Code.from_asset(
            "src",
            bundling=BundlingOptions(
                image=_lambda.Runtime.PYTHON_3_12.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements-lambda.txt -t /asset-output && "
                    "cp -r . /asset-output"
                ],
            ),
        )

        self.main_lambda = _lambda.Function(
            self,
            "RelayHandler",
            function_name=function_name,
            runtime=_lambda.Runtime.PYTHON_3_12,
            handler="handlers.main.lambda_handler",
            code=bundled_code,
            memory_size=lambda_memory_mb,
            timeout=Duration.seconds(lambda_timeout_seconds),
            architecture=_lambda.Architecture.X86_64,
            environment={"ENVIRONMENT": environment, **lambda_environment},
            log_retention=logs.RetentionDays.ONE_WEEK,
            # Async-mode tickets are delivered at most once.
            retry_attempts=0,
        )

        # Async mode re-invokes this function with InvocationType=Event. The ARN is
        # built from the name so the role policy does not depend on the function.
        self.main_lambda.add_to_role_policy(
            iam.PolicyStatement(
                actions=["lambda:InvokeFunction"],
                resources=[
                    Stack.of(self).format_arn(
                        service="lambda",
                        resource="function",
                        resource_name=function_name,
                        arn_format=ArnFormat.COLON_RESOURCE_NAME,
                    )
                ],
            )
        )

        # No cors_preflight here: the handler owns the origin allow-list.
        self.api = apigw.HttpApi(
            self,
            "HttpApi",
            api_name=f"ticket-relay-api-{environment}",
        )

        integration = integrations.HttpLambdaIntegration(
            "LambdaIntegration", self.main_lambda
        )

        route_paths: List[str] = ["/tickets", "/{proxy+}"]
        for path in route_paths:
            self.api.add_routes(
                path=path,
                methods=[apigw.HttpMethod.ANY],
                integration=integration,
            )
