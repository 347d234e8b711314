from setuptools import find_packages, setup

VERSION = '1.0.0'


TEST_REQS = [
    'coverage>=4.2',
    'pytest',
    'pytest-cov',
]


INSTALL_REQS = [
    'intervaltree>=3.0.2',
    'mavis_config>=1.1.0',
    'pandas>=1.1',
    'pysam>=0.15.2',
    'snakemake>=6.1.1',
]


setup(
    name='fusionscan',
    version='{}'.format(VERSION),
    package_dir={'': 'src'},
    packages=find_packages('src', exclude=['tests']),
    package_data={'fusionscan.schemas': ['*.json']},
    description='Gene fusion prediction from chimeric junction reads and discordant read pairs',
    install_requires=INSTALL_REQS,
    extras_require={
        'test': TEST_REQS,
        'dev': ['black', 'flake8'] + TEST_REQS,
    },
    tests_require=TEST_REQS,
    python_requires='>=3.7',
    test_suite='tests',
    entry_points={
        'console_scripts': [
            'fusionscan = fusionscan.main:main',
        ]
    },
)
