from setuptools import setup

setup(
    name='visionlab-s3url',
    version='0.1.0',
    packages=['visionlab.s3url'],
    package_dir={'visionlab.s3url': 's3url'},
    python_requires='>=3.10',
    install_requires=[
        'boto3',
        'botocore',
    ],
    extras_require={
        'test': ['pytest'],
    },
    # Other metadata such as classifiers, description, etc.
)
