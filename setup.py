from glob import glob
from setuptools import setup


setup(
    name='calc',
    version='0.1.0',
    description='Arithmetic expression calculator',
    install_requires=[
        'regex',
        'prompt_toolkit',
    ],
    packages=['calc'],
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    classifiers=[
        "Programming Language :: Python :: 3",
    ],
    extras_require={
        'test': [
            'pytest',
            'pytest-cov',
            'coverage',
            'flake8',
            'bandit',
            'mypy',
        ],
    },
    scripts=glob('bin/*'),
    license='ISC',
)
