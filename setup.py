"""
Setup script for Episode Feed package.
"""

from setuptools import setup, find_packages

setup(
    name='episode-feed',
    version='1.0.0',
    description='A channel video feed mirror serving the latest episodes over HTTP',
    packages=find_packages(exclude=['tests', 'tests.*']),
    package_data={
        'episode_feed': ['static/*'],
    },
    install_requires=[
        'pandas>=2.0',  # ISO8601 format parsing in to_datetime
        'feedparser>=6.0',
        'requests',
        'flask>=2.2',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    python_requires='>=3.9',
    entry_points={
        'console_scripts': [
            'episode-feed=episode_feed.cli:main',
        ],
    },
)
