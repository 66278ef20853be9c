"""Setup script for the PhotoFrame e-paper slideshow."""

import os
from pathlib import Path

from setuptools import find_packages, setup
from setuptools.command.develop import develop
from setuptools.command.install import install


def post_install_setup():
    """Create configuration and data directories and show setup guidance."""
    try:
        config_dir = Path.home() / ".config" / "photoframe"
        data_dir = Path.home() / ".local" / "share" / "photoframe"

        for directory in [config_dir, data_dir, data_dir / "photos" / "processed"]:
            directory.mkdir(parents=True, exist_ok=True)
            if hasattr(os, "chmod"):
                os.chmod(directory, 0o755)

        config_file = config_dir / "config.yaml"
        if not config_file.exists():
            print("\n" + "=" * 60)
            print("PhotoFrame Installation Complete!")
            print("=" * 60)
            print(f"Configuration directory: {config_dir}")
            print(f"Data directory: {data_dir}")
            print("\nNext Steps:")
            print("1. Create config.yaml in the config directory and set panel.vcom")
            print("   to the value printed on your panel's cable")
            print("2. Run 'photoframe --import photo.jpg' to add photos")
            print("3. Run 'photoframe' to start the slideshow")
            print("=" * 60)

    except Exception as e:
        print(f"Warning: Post-install setup failed: {e}")
        print("You may need to create configuration directories manually.")


class PostInstallCommand(install):
    """Custom install command with post-install setup."""

    def run(self):
        install.run(self)
        post_install_setup()


class PostDevelopCommand(develop):
    """Custom develop command with post-install setup."""

    def run(self):
        develop.run(self)
        post_install_setup()


readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Runtime requirements, with pytest lines split out as development extras
requirements_file = Path(__file__).parent / "requirements.txt"
requirements = []
dev_requirements = []

if requirements_file.exists():
    for line in requirements_file.read_text().strip().split("\n"):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        if "pytest" in line:
            dev_requirements.append(line)
        else:
            requirements.append(line)

setup(
    name="photoframe",
    version="1.0.0",
    description="E-paper photo slideshow for Raspberry Pi with 16-level grayscale IT8951 panels",
    long_description=long_description,
    long_description_content_type="text/markdown",
    author="PhotoFrame Team",
    author_email="support@photoframe.local",
    packages=find_packages(exclude=["tests*", "docs*"]),
    include_package_data=True,
    install_requires=requirements,
    extras_require={
        "dev": dev_requirements
        + [
            "black>=23.0.0",
            "isort>=5.12.0",
            "mypy>=1.0.0",
            "pre-commit>=3.0.0",
        ],
        "test": dev_requirements,
        "rpi": [
            "RPi.GPIO>=0.7.1",
            "spidev>=3.5",
        ],
    },
    python_requires=">=3.9",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "Operating System :: POSIX :: Linux",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Multimedia :: Graphics",
        "Topic :: System :: Hardware",
        "Framework :: AsyncIO",
    ],
    keywords="e-paper eink it8951 raspberry-pi photo-frame slideshow dithering",
    entry_points={
        "console_scripts": [
            "photoframe=photoframe.__main__:main",
        ],
    },
    cmdclass={
        "install": PostInstallCommand,
        "develop": PostDevelopCommand,
    },
    zip_safe=False,
    platforms=["linux"],
)
