from setuptools import find_packages, setup

setup(
    name="keycloakadmin",
    package_dir={"": "src"},
    packages=find_packages("src"),
    version="0.1.0",
    license="MIT",
    long_description="",
    long_description_content_type="text/markdown",
    description="An async wrapper over the Keycloak admin REST API",
    keywords=["Keycloak", "OpenID Connect", "Admin API", "API Wrapper"],
    python_requires=">=3.10",
    install_requires=["httpx"],
    extras_require={"test": ["pytest", "pytest-asyncio"]},
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Topic :: Software Development :: Libraries",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
)
