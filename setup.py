from setuptools import setup, find_packages

setup(
    name='riskscope',
    version='1.0.0',
    description='Heuristic risk scoring and hosting triage for suspicious domains and URLs.',
    package_dir={"": "src"},
    packages=find_packages(where="src", include=["riskscope", "riskscope.*"]),
    include_package_data=True,
    install_requires=[
        'rich>=14.0.0',
        'requests>=2.32.3',
        'pyfiglet>=1.0.2',
        'python-dotenv>=1.0.0',
        'dnspython>=2.7.0',
        'fastapi>=0.110.0',
        'uvicorn>=0.29.0',
    ],
    extras_require={
        'test': [
            'pytest>=8.0.0',
            'httpx>=0.27.0',
        ],
    },
    entry_points={
        'console_scripts': [
            'riskscope=riskscope.cli:main',
        ],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
        'Operating System :: OS Independent',
    ],
    python_requires='>=3.9',
)
