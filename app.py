#!/usr/bin/env python3
import aws_cdk as cdk
from lambdalogs_stack import LambdaLogsStack

app = cdk.App()
LambdaLogsStack(app, "LambdaLogsStack")
app.synth()
