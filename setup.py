from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="mcp-session-server",
    version="1.0.0",
    author="Scott Wilcox",
    author_email="example@example.com",  # Replace with actual email
    description="Minimal Model Context Protocol server speaking JSON-RPC 2.0 over raw HTTP and SSE",
    long_description=long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: GNU Affero General Public License v3",
        "Operating System :: OS Independent",
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    ],
    packages=find_packages(include=["mcp_session_server", "mcp_session_server.*"]),
    include_package_data=True,
    python_requires=">=3.9",
    install_requires=[
        "requests>=2.25.0",
        "jsonschema>=4.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
            "aiohttp>=3.8.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "mcp-session-server=mcp_session_server.server:main",
            "mcp-session-check=mcp_session_server.check_server:main",
        ],
    },
)
