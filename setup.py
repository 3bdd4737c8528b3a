#!/usr/bin/env python

import os

from setuptools import setup, find_packages
from setuptools import Command


pypath = os.path.join('src', 'python')
exclude_spec = ['*.test', '*.test.*', 'test.*']
packages_to_include = find_packages(where=pypath, exclude=exclude_spec)


class CleanCommand(Command):
    """Clean package"""
    description = 'clean package'
    user_options = [('all', None, 'clean all, default is build only'),
                    ('version=', None, 'sets the version, default is 0.1')]

    def initialize_options(self):
        self.all = None
        self.version = None

    def finalize_options(self):
        self.all = self.all is not None

    def run(self):
        if self.version is not None:
            self.distribution.metadata.version = self.version
        workdir = os.path.dirname(os.path.abspath(__file__))
        os.system('rm -rf ' + os.path.join(workdir, 'build'))
        if self.all:
            os.system('rm -rf ' + os.path.join(workdir, pypath, 'pdrt.egg-info'))
            os.system('rm -rf ' + os.path.join(workdir, 'dist'))


setup(
    name='pdrt',
    version='0.1',
    description='Projective DRT lambda calculus: alpha conversion, beta reduction and purification',
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Programming Language :: Python :: 3',
        'Topic :: Text Processing :: Linguistic',
    ],
    package_dir={'': pypath},
    packages=packages_to_include,
    install_requires=[
        'networkx',
    ],
    test_suite='pdrt',
    cmdclass={
        'clean': CleanCommand,
    },
    zip_safe=False,
)
