#!/usr/bin/python
from setuptools import setup, find_namespace_packages

setup(
      name='fanssh',
      version='0.1.0',
      description='Run one shell command on many hosts over SSH within a global timeout',
      author='fanssh developers',
      license='MIT',
      # 子包没有 __init__.py，需要按命名空间包查找
      packages=find_namespace_packages(include=["fanssh", "fanssh.*"], exclude=["fanssh.tests", "fanssh.tests.*"]),
      include_package_data=True,
      zip_safe=False,
      # 安装依赖的其他包
      install_requires = [
        "asyncssh",
        "click",
        "PyYAML",
        "rich",
      ],
      extras_require={
        "test": [
          "pytest",
          "pytest-asyncio",
        ],
      },
    # 安装后，命令行执行 `fanssh` 相当于调用 fanssh.__main__:main
    entry_points={
        'console_scripts':[
            'fanssh = fanssh.__main__:main'
        ]
    },
    python_requires='>=3.8'
)
