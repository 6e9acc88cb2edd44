# setup.py
from setuptools import setup, find_packages

with open('requirements.txt') as f:
    requirements = [line for line in f.read().splitlines() if line and not line.startswith('#')]

setup(
    name='service_provisioner',
    version='1.0.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    author='',
    author_email='',
    description='Provisions a Python virtual environment and registers it as a Windows service via NSSM.',
    long_description='This package contains the provisioning engine, its NSSM and venv tool wrappers, and the provision-service command line entry point.',
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    python_requires='>=3.10',
    entry_points={
        'console_scripts': [
            'provision-service=provisioner.cli:main',
        ],
    },
)
