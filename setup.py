from setuptools import setup, find_packages

setup(
    name='tally',
    version='1.0',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'regex',
        'pyyaml',
    ],
    extras_require={
        'tests': ['pytest'],
    },
    python_requires='>=3.9',
    entry_points={
        'console_scripts': [
            'tally = cli.count:main',
            'tally-dump = cli.count:main_dump',
        ],
    },
)
