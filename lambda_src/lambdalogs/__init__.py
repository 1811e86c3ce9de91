# lambdalogs: per-invocation telemetry written to MongoDB from a Lambda function
