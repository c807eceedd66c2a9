from uiauto_objrepo.cli import main

raise SystemExit(main())
