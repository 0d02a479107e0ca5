"""
Shared module to hold constant values for the library. The object names and
data keys here are shared with the rest of the running system and must not
change.
"""

# Workloads
SYSTEM_APP_NAME = "system-app"
SYSTEM_SIDEKIQ_NAME = "system-sidekiq"

# Legacy SMTP config map and the secret that replaces it
SMTP_CONFIGMAP_NAME = "smtp"
SYSTEM_SMTP_SECRET_NAME = "system-smtp"

# Config map that used to hold the S3 settings in plaintext
SYSTEM_ENVIRONMENT_CONFIGMAP_NAME = "system-environment"

# S3 keys relocated into the AWS credentials secret
AWS_BUCKET = "AWS_BUCKET"
AWS_REGION = "AWS_REGION"

# Kinds and api versions of the objects touched by the upgrade
CONFIGMAP_KIND = "ConfigMap"
SECRET_KIND = "Secret"
CORE_API_VERSION = "v1"
DEPLOYMENT_CONFIG_KIND = "DeploymentConfig"
DEPLOYMENT_CONFIG_API_VERSION = "apps.openshift.io/v1"
IMAGE_STREAM_KIND = "ImageStream"
IMAGE_STREAM_API_VERSION = "image.openshift.io/v1"

# Delimiter used for nested dict keys
NESTED_DICT_DELIM = "."
