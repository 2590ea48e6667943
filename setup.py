from setuptools import setup, find_packages

setup(
    name="folio",
    version="0.1.0",
    description="Folio - portfolio content persistence with remote sync, local cache fallback and an admin API",
    packages=find_packages(include=["Folio", "Folio.*"]),
    python_requires=">=3.10",
    install_requires=[
        # Data model
        "pydantic>=2.6.0",

        # Network
        "requests>=2.28.0",

        # Web framework
        "flask>=2.3.0",
        "flask-cors>=4.0.0",
        "gunicorn>=20.0.0",
        "python-dotenv>=0.19.0",

        # Auth
        "PyJWT>=2.6.0",

        # Logging
        "python-json-logger>=3.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
        "dev": [
            "pytest>=7.0.0",
            "black>=22.0.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "folio=Folio.cli.repl:main",
        ],
    },
)
