from setuptools import setup, find_packages

DESCRIPTION = 'loggerlink'

# pip install loggerlink # Standard package
# pip install loggerlink[windows] # LoggerNet DataLogger COM binding (pywin32)
# pip install loggerlink[test] # Test dependencies

NAME : str
AUTHOR : str
__version__ : str
# Load NAME, AUTHOR and __version__ from file
with open('loggerlink/version.py', 'r', encoding='utf-8') as f:
    exec(f.read())

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

# Setting up
setup(
    name=NAME,
    version=__version__,
    author=AUTHOR,
    description=DESCRIPTION,
    long_description_content_type="text/markdown",
    long_description=long_description,
    entry_points = {
        'console_scripts': [
            'loggerlink=loggerlink.cli.loggerlink:main'],
    },
    extras_require = {
        'windows' : ["pywin32; sys_platform == 'win32'"],
        'test' : ["pytest"]
    },
    packages=find_packages(include=['loggerlink', 'loggerlink.*']),
    python_requires='>=3.10',
    install_requires=['rich'],
    keywords=['python', 'loggerlink', 'loggernet', 'datalogger', 'campbell'],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Programming Language :: Python :: 3",
        "Operating System :: Microsoft :: Windows",
        "Operating System :: Unix"
    ]
)
