from dir_diff.cli import main

raise SystemExit(main())
