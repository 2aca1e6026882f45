import os
import logging

import boto3
from botocore.configloader import load_config, raw_config_parse
from botocore.exceptions import ConfigNotFound, ConfigParseError, ProfileNotFound

from .utils import DEFAULT_AWS_REGION

__all__ = [
    'load_aws_profiles',
    'resolve_active_profile',
    'resolve_default_region',
]

logger = logging.getLogger(__name__)

PROFILE_FRAGMENT_KEY = "aws.profile"
REGION_FRAGMENT_KEY = "aws.region"


def _read_config(loader, path):
    try:
        return loader(path)
    except ConfigNotFound:
        return {}
    except ConfigParseError as e:
        logger.warning(f"Ignoring unreadable AWS config file '{path}': {e}")
        return {}


def load_aws_profiles():
    """
    Read profile sections from the AWS config and shared credentials files.

    The config file is AWS_CONFIG_FILE (default ~/.aws/config) and the
    credentials file is AWS_SHARED_CREDENTIALS_FILE (default
    ~/.aws/credentials). A missing file counts as empty, as does one botocore cannot parse. When both files
    define the same profile, the keys are merged with the credentials file
    winning.

    Returns:
        dict: profile name -> dict of settings.
    """
    config_path = os.environ.get('AWS_CONFIG_FILE', os.path.expanduser('~/.aws/config'))
    credentials_path = os.environ.get('AWS_SHARED_CREDENTIALS_FILE', os.path.expanduser('~/.aws/credentials'))

    # ~/.aws/config names sections "profile <name>", ~/.aws/credentials just "<name>"
    sources = (
        _read_config(load_config, config_path).get('profiles', {}),
        _read_config(raw_config_parse, credentials_path),
    )
    profiles = {}
    for source in sources:
        for name, settings in source.items():
            profiles.setdefault(name, {}).update(settings)
    return profiles


def resolve_active_profile(url):
    """
    Return the name of the AWS profile in effect for url, or None.

    Looked up in order:
      - the 'aws.profile' key of the URL fragment, e.g. '#aws.profile=wasabi'
      - the AWS_PROFILE environment variable
      - 'default', if a profile of that name is configured
    """
    profile = url.fragment_params.get(PROFILE_FRAGMENT_KEY)
    if profile:
        return profile

    profile = os.environ.get('AWS_PROFILE')
    if profile:
        return profile

    if 'default' in load_aws_profiles():
        return 'default'

    logger.debug(f"No active AWS profile for '{url}'")
    return None


def _profile_region(profile_config):
    # Service-specific settings override the profile-level region
    s3_config = profile_config.get('s3')
    if isinstance(s3_config, dict) and s3_config.get('region'):
        return s3_config['region']
    return profile_config.get('region')


def resolve_default_region(url):
    """
    Return the region to use for url when neither the host nor a prior
    S3Info supplies one.

    Looked up in order:
      - the 'aws.region' key of the URL fragment
      - the region of the active profile (see resolve_active_profile)
      - the AWS_REGION, then AWS_DEFAULT_REGION environment variables
      - the region of a default boto3.Session()
      - DEFAULT_AWS_REGION ('us-east-1')
    """
    region = url.fragment_params.get(REGION_FRAGMENT_KEY)
    if region:
        return region

    profile = resolve_active_profile(url)
    if profile is not None:
        profile_config = load_aws_profiles().get(profile, {})
        region = _profile_region(profile_config)
        if region:
            return region

    region = os.environ.get('AWS_REGION') or os.environ.get('AWS_DEFAULT_REGION')
    if region:
        return region

    try:
        region = boto3.Session().region_name
    except (ProfileNotFound, ConfigParseError) as e:
        logger.debug(f"boto3 session has no region for '{url}': {e}")
        region = None
    if region:
        return region

    logger.debug(f"No configured region for '{url}'; using {DEFAULT_AWS_REGION}")
    return DEFAULT_AWS_REGION
