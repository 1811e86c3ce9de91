import os
from typing import Optional

from aws_cdk import (
    BundlingOptions,
    Duration,
    Stack,
    aws_lambda as _lambda,
)
from constructs import Construct

LAMBDA_SRC = os.path.join(os.path.dirname(os.path.abspath(__file__)), "lambda_src")


class LambdaLogsStack(Stack):
    def __init__(self, scope: Construct, construct_id: str, mongodb_url: Optional[str] = None, **kwargs):
        super().__init__(scope, construct_id, **kwargs)

        mongodb_url = (
            mongodb_url
            or self.node.try_get_context("mongodb_url")
            or os.environ.get("MONGODB_URL")
        )
        if not mongodb_url:
            raise ValueError("MongoDB URL required: pass -c mongodb_url=... or set MONGODB_URL")

        runtime = _lambda.Runtime.PYTHON_3_11

        # pymongo isn't in the managed runtime, install it next to the handler
        code = _lambda.Code.from_asset(
            LAMBDA_SRC,
            bundling=BundlingOptions(
                image=runtime.bundling_image,
                command=[
                    "bash", "-c",
                    "pip install -r requirements.txt -t /asset-output && cp -au . /asset-output",
                ],
            ),
        )

        self.function = _lambda.Function(
            self,
            "LambdaLogsFunc",
            function_name="lambdalogs",
            runtime=runtime,
            handler="lambda_function.handler",
            code=code,
            memory_size=512,
            timeout=Duration.seconds(10),
            environment={
                "MONGODB_URL": mongodb_url,
                "LOG_LEVEL": self.node.try_get_context("log_level") or "INFO",
            },
        )
