from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="device-inventory-sync",
    version="0.1.0",
    author="Endpoint Engineering",
    description="Runbooks that reconcile device inventory across Intune, Autopilot, Snipe-IT and Action1",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Development Status :: 3 - Alpha",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Systems Administration",
    ],
    python_requires=">=3.8",
    install_requires=[
        "requests>=2.25.0",
        "pandas>=1.0.0",
        "python-dotenv>=0.15.0",
        "python-dateutil>=2.8.0",
        "msal>=1.20.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            # Existence checks (report only)
            "intune-missing-in-snipeit=scripts.runbooks.intune_missing_in_snipeit:main",
            "action1-missing-in-intune=scripts.runbooks.action1_missing_in_intune:main",

            # Attribute syncs (batched writes)
            "snipeit-category-to-intune=scripts.runbooks.snipeit_category_to_intune:main",
            "autopilot-group-tags=scripts.runbooks.autopilot_group_tags:main",
        ],
    },
)
