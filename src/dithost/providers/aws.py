"""AWS EC2 provider.

Runs one EC2 instance per application, bootstrapped with the instance
config's user data.

Architecture:

    .. code-block:: text

        deploy(config, instance_config)
          ├── imageId set?        → use it
          ├── amiNamePattern set? → newest AMI (owners amazon/self) whose
          │                         name matches the glob
          ├── RunInstances(ImageId, InstanceType, UserData, Min/Max=1)
          └── InstanceInfo(starting, {"instanceId": ...})

        get_info(ref)  → DescribeInstances → EC2 state mapped to InstanceStatus
        destroy(ref)   → TerminateInstances

    boto3 is blocking, so every EC2 call runs in a worker thread
    (``asyncio.to_thread``). ``ClientError`` codes that AWS documents as
    transient surface as ``ProviderError(retryable=True)``; retrying is
    left to the caller.

Configuration (raw JSON, camelCase)::

    {"imageId": "ami-0abc", "instanceType": "t3.small"}
    {"amiNamePattern": "ubuntu/images/hvm-ssd/ubuntu-jammy-22.04-amd64-server-*"}

Tags:
    dithost, providers, aws, ec2, boto3, cloud-init
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from fnmatch import fnmatchcase
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dithost.core.errors import ProviderError, TransformError
from dithost.core.logging import get_logger
from dithost.mapping.mapper import ConfigMapper
from dithost.models.app import InstanceInfo, InstanceStatus
from dithost.models.instance_config import InstanceConfig
from dithost.providers.base import BaseProvider

logger = get_logger(__name__)

DEFAULT_INSTANCE_TYPE = "t3.micro"
AMI_OWNERS = ["amazon", "self"]

# EC2 instance state name -> InstanceStatus. Anything else is ERRORED.
EC2_STATE_MAP: dict[str, InstanceStatus] = {
    "pending": InstanceStatus.STARTING,
    "running": InstanceStatus.RUNNING,
    "stopping": InstanceStatus.DESTROYING,
    "shutting-down": InstanceStatus.DESTROYING,
    "terminated": InstanceStatus.DESTROYED,
}

RETRYABLE_ERROR_CODES = frozenset(
    {
        "RequestLimitExceeded",
        "Throttling",
        "ThrottlingException",
        "InsufficientInstanceCapacity",
        "InternalError",
        "ServiceUnavailable",
        "Unavailable",
    }
)


class AWSProviderConfig(BaseModel):
    """EC2 launch settings. One of ``imageId`` / ``amiNamePattern`` is required."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    image_id: str | None = None
    instance_type: str = Field(default=DEFAULT_INSTANCE_TYPE, min_length=1)
    ami_name_pattern: str | None = None


class AWSProviderRef(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    instance_id: str = Field(min_length=1)


class AWSConfigMapper(ConfigMapper[AWSProviderConfig, AWSProviderConfig]):
    """Validate raw AWS provider JSON and enforce an image source."""

    input_model = AWSProviderConfig
    output_model = AWSProviderConfig

    def map(self, config: AWSProviderConfig) -> AWSProviderConfig:
        if not config.image_id and not config.ami_name_pattern:
            raise TransformError(
                "Either imageId or amiNamePattern must be provided"
            ).with_context(provider=AWSProvider.provider_name)
        return config


def create_ec2_client(region: str, endpoint_url: str | None = None) -> Any:
    """Build a boto3 EC2 client (LocalStack etc. via ``endpoint_url``)."""
    client_kwargs: dict[str, Any] = {"service_name": "ec2", "region_name": region}
    if endpoint_url:
        client_kwargs["endpoint_url"] = endpoint_url
    return boto3.client(**client_kwargs)


def _parse_creation_date(value: str) -> datetime | None:
    # EC2 format: "2024-10-30T12:00:00.000Z"
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)


class AWSProvider(BaseProvider[AWSProviderConfig, AWSProviderRef]):
    """EC2-backed provider."""

    provider_name = "aws"
    config_model = AWSProviderConfig
    ref_model = AWSProviderRef

    def __init__(self, ec2_client: Any):
        self.ec2_client = ec2_client

    @classmethod
    def from_region(cls, region: str, endpoint_url: str | None = None) -> AWSProvider:
        provider = cls(create_ec2_client(region, endpoint_url))
        logger.info("aws_provider_initialized", region=region, endpoint=endpoint_url)
        return provider

    # --- AMI discovery ---

    def find_newest_ami(self, name_pattern: str) -> str | None:
        """Image id of the newest AMI whose name matches ``name_pattern``.

        ``name_pattern`` is a shell-style glob (``*``, ``?``, ``[seq]``). AMIs
        without a name or a parseable creation date are skipped.
        """
        paginate_kwargs: dict[str, Any] = {"Owners": AMI_OWNERS}
        if "[" not in name_pattern:
            # EC2's name filter understands * and ? but not [seq].
            paginate_kwargs["Filters"] = [{"Name": "name", "Values": [name_pattern]}]

        newest_id: str | None = None
        newest_date: datetime | None = None
        paginator = self.ec2_client.get_paginator("describe_images")
        for page in paginator.paginate(**paginate_kwargs):
            for image in page.get("Images", []):
                name = image.get("Name")
                created = image.get("CreationDate")
                if not name or not created or not fnmatchcase(name, name_pattern):
                    continue
                created_at = _parse_creation_date(created)
                if created_at is None:
                    continue
                if newest_date is None or created_at > newest_date:
                    newest_id, newest_date = image.get("ImageId"), created_at
        return newest_id

    async def _resolve_image_id(self, config: AWSProviderConfig) -> str:
        if config.image_id:
            return config.image_id
        if not config.ami_name_pattern:
            raise ProviderError(
                "Invalid configuration: either imageId or amiNamePattern must be provided",
                provider=self.provider_name,
            )
        image_id = await self._call(self.find_newest_ami, config.ami_name_pattern)
        if image_id is None:
            raise ProviderError(
                f"No AMI found matching '{config.ami_name_pattern}'",
                provider=self.provider_name,
            )
        logger.info("aws_ami_resolved", pattern=config.ami_name_pattern, image_id=image_id)
        return image_id

    # --- Lifecycle ---

    async def _do_deploy(
        self, config: AWSProviderConfig, instance_config: InstanceConfig
    ) -> InstanceInfo:
        image_id = await self._resolve_image_id(config)
        # boto3 base64-encodes UserData for RunInstances
        response = await self._call(
            self.ec2_client.run_instances,
            ImageId=image_id,
            InstanceType=config.instance_type,
            MinCount=1,
            MaxCount=1,
            UserData=instance_config.user_data,
        )
        instances = response.get("Instances") or []
        instance_id = instances[0].get("InstanceId") if instances else None
        if not instance_id:
            raise ProviderError(
                "Deployment failed: RunInstances returned no instance",
                provider=self.provider_name,
            )
        return InstanceInfo(
            status=InstanceStatus.STARTING,
            ref=self.dump_ref(AWSProviderRef(instance_id=instance_id)),
        )

    async def _do_get_info(self, ref: AWSProviderRef) -> InstanceInfo:
        response = await self._call(
            self.ec2_client.describe_instances, InstanceIds=[ref.instance_id]
        )
        instance = None
        for reservation in response.get("Reservations", []):
            for candidate in reservation.get("Instances", []):
                instance = candidate
                break
            if instance is not None:
                break
        if instance is None:
            raise ProviderError(
                f"Instance {ref.instance_id} not found", provider=self.provider_name
            )
        state = (instance.get("State") or {}).get("Name", "")
        return InstanceInfo(
            status=EC2_STATE_MAP.get(state, InstanceStatus.ERRORED),
            ref=self.dump_ref(ref),
        )

    async def _do_destroy(self, ref: AWSProviderRef) -> None:
        await self._call(self.ec2_client.terminate_instances, InstanceIds=[ref.instance_id])

    async def _call(self, fn: Any, *args: Any, **kwargs: Any) -> Any:
        """Run a blocking boto3 call in a worker thread, translating botocore errors."""
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            raise ProviderError(
                f"EC2 request failed ({code or 'unknown'}): {e}",
                provider=self.provider_name,
                retryable=code in RETRYABLE_ERROR_CODES,
                cause=e,
            ).with_context(aws_error_code=code) from e
        except BotoCoreError as e:
            raise ProviderError(
                f"EC2 request failed: {e}",
                provider=self.provider_name,
                retryable=True,
                cause=e,
            ) from e


__all__ = [
    "AWSConfigMapper",
    "AWSProvider",
    "AWSProviderConfig",
    "AWSProviderRef",
    "EC2_STATE_MAP",
    "create_ec2_client",
]
