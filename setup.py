import os
import re

from setuptools import setup


def get_version():
    module_init = 'pycolord/version.py'

    if not os.path.isfile(module_init):
        module_init = '../' + module_init
        if not os.path.isfile(module_init):
            raise ValueError('Unable to determine version!')

    with open(module_init, encoding='utf-8') as version_file:
        return re.search(r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]',
                         version_file.read()).group(1)


setup(name='pycolord',
      version=get_version(),
      description='Synchronous client for the colord color management daemon',
      license='LGPL',
      platforms='Linux',
      packages=['pycolord'],
      entry_points={
          'console_scripts': [
              'pycolord = pycolord.cli:main',
          ]
      },
      install_requires=['argcomplete', 'colorlog', 'dbus-fast', 'ruamel.yaml', 'wrapt'],
      extras_require={
          'test': ['pytest'],
      },
      python_requires='>=3.10',
      keywords='colord color management icc dbus',
      zip_safe=False,
      classifiers=[
          'Development Status :: 3 - Alpha',
          'Environment :: Console',
          'Intended Audience :: Developers',
          'License :: OSI Approved :: GNU Lesser General Public License v3 (LGPLv3)',
          'Operating System :: POSIX :: Linux',
          'Programming Language :: Python :: 3 :: Only',
          'Topic :: Multimedia :: Graphics',
      ])
