from setuptools import setup, find_packages

setup(
    name="davrelay",
    version="0.1.0",
    packages=find_packages(),
    install_requires=[
        "click>=8.0.0",
        "requests>=2.25.0",
        "urllib3>=1.26.0",
        "colorama>=0.4.0",
        "mcp>=1.2.0,<2",
    ],
    entry_points={
        'console_scripts': [
            'davrelay=davrelay.cli:main',
        ],
    },
    description="Forward WebDAV requests to one server, with reusable PROPFIND property presets",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
    ],
    python_requires=">=3.10",
    extras_require={
        'dev': [
            'pytest>=6.0.0',
            'pytest-cov>=2.0.0',
            'black>=20.8b1',
            'mypy>=0.800',
        ],
    },
)
